from __future__ import annotations

import numpy as np
import pytest

from sinewave.analyzer import analyze_waveform
from sinewave.config import ExtractionConfig
from sinewave.errors import DegenerateTrajectory, SignalTooShort
from sinewave.trajectory import Method, SampleBuffer

TARGETS = (700.0, 1200.0, 2600.0)


def _steady_median(track) -> float:
    freqs = track.frequencies()
    n = freqs.size
    return float(np.median(freqs[n // 4 : 3 * n // 4]))


def test_vowel_formants_are_tracked(synth_vowel) -> None:
    buf = SampleBuffer(synth_vowel(TARGETS, duration=1.0), 8000)
    traj = analyze_waveform(buf, transcript="ah")

    assert traj.method is Method.LPC
    assert traj.transcript == "ah"
    assert traj.raw_audio is buf
    for track, target in zip(traj.tracks, TARGETS):
        assert target * 0.9 < _steady_median(track) < target * 1.1


def test_tracks_share_time_axis(synth_vowel) -> None:
    samples = synth_vowel(duration=0.4)
    traj = analyze_waveform(SampleBuffer(samples, 8000))

    assert traj.total_duration == pytest.approx(0.4)
    expected = np.arange(samples.size // 256) * 256 / 8000
    for track in traj.tracks:
        np.testing.assert_allclose(track.times(), expected)
        assert np.all(np.diff(track.times()) > 0)
        assert track.times()[-1] <= traj.total_duration
        assert np.all(track.frequencies() >= 0)


def test_amplitudes_are_globally_normalized(synth_vowel) -> None:
    traj = analyze_waveform(SampleBuffer(synth_vowel(), 8000))
    weights = ExtractionConfig().tier_weights

    f1 = traj.f1.amplitudes()
    assert f1.max() == pytest.approx(1.0, abs=1e-12)
    for track, weight in zip(traj.tracks, weights):
        amps = track.amplitudes()
        assert np.all(amps >= 0)
        assert np.all(amps <= weight + 1e-12)


def test_resampled_input_is_analyzed(synth_vowel) -> None:
    base = synth_vowel(duration=0.5)
    # 16 kHz copy through linear interpolation back to the 8 kHz grid
    upsampled = np.interp(np.arange(base.size * 2) / 2.0, np.arange(base.size), base)
    traj = analyze_waveform(SampleBuffer(upsampled, 16000))
    assert traj.total_duration == pytest.approx(0.5)
    assert len(traj.f1) == base.size // 256


def test_short_buffer_raises() -> None:
    with pytest.raises(SignalTooShort):
        analyze_waveform(SampleBuffer(np.ones(300), 8000))


def test_silence_is_degenerate() -> None:
    with pytest.raises(DegenerateTrajectory):
        analyze_waveform(SampleBuffer(np.zeros(4000), 8000))


def test_analysis_is_deterministic(synth_vowel) -> None:
    buf_a = SampleBuffer(synth_vowel(seed=99), 22050)
    buf_b = SampleBuffer(synth_vowel(seed=99), 22050)
    assert analyze_waveform(buf_a).to_dict() == analyze_waveform(buf_b).to_dict()


def test_leading_silence_keeps_seed_frequencies(synth_vowel) -> None:
    samples = np.r_[np.zeros(1024), synth_vowel(duration=0.3)]
    traj = analyze_waveform(SampleBuffer(samples, 8000))
    assert traj.f1.points[0].freq == 500.0
    assert traj.f2.points[0].freq == 1500.0
    assert traj.f3.points[0].amp == 0.0
