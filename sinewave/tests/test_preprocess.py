from __future__ import annotations

import numpy as np
import pytest

from sinewave.config import ExtractionConfig
from sinewave.dsp.preprocess import pre_emphasis, prepare_signal, resample_linear
from sinewave.errors import InvalidSignal, SignalTooShort
from sinewave.trajectory import SampleBuffer


def test_resample_halves_length_and_interpolates() -> None:
    x = np.arange(10, dtype=np.float64)
    y = resample_linear(x, 16000, 8000)
    np.testing.assert_allclose(y, [0, 2, 4, 6, 8])

    up = resample_linear(np.array([0.0, 1.0, 2.0]), 4000, 8000)
    np.testing.assert_allclose(up, [0.0, 0.5, 1.0, 1.5, 2.0, 2.0])


def test_resample_same_rate_is_a_copy() -> None:
    x = np.array([0.1, 0.2, 0.3])
    y = resample_linear(x, 8000, 8000)
    np.testing.assert_array_equal(x, y)
    assert y is not x


def test_resample_keeps_tone_frequency() -> None:
    sr = 44100
    t = np.arange(int(0.2 * sr)) / sr
    y = resample_linear(np.sin(2 * np.pi * 300 * t), sr, 8000)
    spectrum = np.abs(np.fft.rfft(y * np.hanning(y.size)))
    peak = np.fft.rfftfreq(y.size, 1 / 8000)[np.argmax(spectrum)]
    assert abs(peak - 300) < 10


def test_pre_emphasis_difference_equation() -> None:
    x = np.array([1.0, 2.0, 3.0, 0.0])
    np.testing.assert_allclose(pre_emphasis(x, 0.9), [1.0, 1.1, 1.2, -2.7])


def test_prepare_signal_rejects_short_buffers() -> None:
    cfg = ExtractionConfig()
    with pytest.raises(SignalTooShort) as info:
        prepare_signal(SampleBuffer(np.ones(1000), 16000), cfg)
    assert info.value.n_samples == 500
    assert info.value.window_size == 512


def test_prepare_signal_accepts_exactly_one_window() -> None:
    out = prepare_signal(SampleBuffer(np.ones(1024), 16000), ExtractionConfig())
    assert out.size == 512


@pytest.mark.parametrize(
    "buffer",
    [
        SampleBuffer(np.r_[np.ones(2000), np.nan], 8000),
        SampleBuffer(np.ones(2000), 0),
        SampleBuffer(np.ones(2000), float("nan")),
    ],
)
def test_prepare_signal_rejects_invalid_input(buffer: SampleBuffer) -> None:
    with pytest.raises(InvalidSignal):
        prepare_signal(buffer, ExtractionConfig())


def test_sample_buffer_is_read_only() -> None:
    source = np.zeros(4)
    buf = SampleBuffer(source, 8000)
    source[0] = 1.0
    assert buf.samples[0] == 0.0
    with pytest.raises(ValueError):
        buf.samples[0] = 2.0
