from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from sinewave.config import ExtractionConfig
from sinewave.dsp.formants import select_formants
from sinewave.dsp.lpc import frame_lpc, hann_window, iter_frames
from sinewave.dsp.preprocess import prepare_signal
from sinewave.dsp.smoothing import SmoothingState, normalize_levels, smooth_frame
from sinewave.errors import DegenerateTrajectory
from sinewave.trajectory import Method, SampleBuffer, UtteranceTrajectory, make_tracks

log = logging.getLogger(__name__)


def analyze_waveform(
    buffer: SampleBuffer,
    cfg: Optional[ExtractionConfig] = None,
    transcript: str = "",
) -> UtteranceTrajectory:
    """Run the LPC path over a whole utterance.

    Raises an ``AnalysisError`` subclass when the buffer is too short, not
    analyzable, or yields no formant energy at all.
    """

    cfg = cfg or ExtractionConfig()
    sr = float(cfg.analysis_rate)
    audio = prepare_signal(buffer, cfg)
    window = hann_window(cfg.window_size)

    state = SmoothingState.seeded(cfg)
    times: list[float] = []
    freqs: list[list[float]] = []
    levels: list[np.ndarray] = []
    silent = 0
    unconverged = 0

    for frame in iter_frames(audio, cfg.hop_size, sr, window):
        model = frame_lpc(frame.samples, cfg.lpc_order, cfg.silence_threshold)
        if model.silent:
            silent += 1
        candidates, roots = select_formants(model, sr, cfg)
        if not roots.converged:
            unconverged += 1
        levels.append(smooth_frame(state, candidates, cfg))
        freqs.append(list(state.freqs))
        times.append(frame.time)

    if silent or unconverged:
        log.debug(
            "%d frames: %d silent, %d without solver convergence",
            len(times),
            silent,
            unconverged,
        )

    amps = normalize_levels(np.array(levels), cfg)
    freq_arr = np.array(freqs, dtype=np.float64)
    if not np.all(np.isfinite(freq_arr)) or np.any(freq_arr < 0):
        raise DegenerateTrajectory("formant frequencies left the valid range")

    total = audio.size / sr
    return UtteranceTrajectory(
        total_duration=total,
        tracks=make_tracks(times, freq_arr, amps),
        method=Method.LPC,
        transcript=transcript,
        raw_audio=buffer,
    )
