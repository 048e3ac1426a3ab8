from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.signal import lfilter

from sinewave.config import ExtractionConfig
from sinewave.errors import InvalidSignal, SignalTooShort
from sinewave.trajectory import SampleBuffer


def resample_linear(
    x: NDArray[np.floating], from_rate: float, to_rate: float
) -> NDArray[np.float64]:
    """Resample by linear interpolation between neighbouring samples."""

    sig = np.asarray(x, dtype=np.float64).reshape(-1)
    if from_rate <= 0 or to_rate <= 0:
        raise InvalidSignal("sample rates must be positive")
    if from_rate == to_rate or sig.size == 0:
        return sig.copy()

    ratio = from_rate / to_rate
    n_out = int(np.floor(sig.size / ratio))
    src = np.arange(n_out, dtype=np.float64) * ratio
    return np.interp(src, np.arange(sig.size, dtype=np.float64), sig)


def pre_emphasis(x: NDArray[np.floating], coef: float = 0.9) -> NDArray[np.float64]:
    """Apply ``y[n] = x[n] - coef * x[n-1]``."""

    return lfilter([1.0, -coef], [1.0], np.asarray(x, dtype=np.float64))


def prepare_signal(buffer: SampleBuffer, cfg: ExtractionConfig) -> NDArray[np.float64]:
    """Resample ``buffer`` to the analysis rate and pre-emphasize it."""

    if not np.isfinite(buffer.sample_rate) or buffer.sample_rate <= 0:
        raise InvalidSignal(f"bad sample rate: {buffer.sample_rate}")
    if not np.all(np.isfinite(buffer.samples)):
        raise InvalidSignal("buffer contains non-finite samples")

    audio = resample_linear(buffer.samples, buffer.sample_rate, cfg.analysis_rate)
    if audio.size < cfg.window_size:
        raise SignalTooShort(int(audio.size), cfg.window_size)
    return pre_emphasis(audio, cfg.pre_emphasis)
