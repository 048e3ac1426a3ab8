from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class LPCModel:
    """Prediction-error filter ``A(z) = 1 - sum(a[j] z^-j)`` of one frame.

    ``coeffs[0]`` is always 1. A zero gain marks a degenerate frame
    (silence or numerical breakdown); its poles carry no energy. Silent
    frames keep identity coefficients and have no poles worth solving for.
    """

    coeffs: NDArray[np.float64]
    gain: float
    silent: bool = False

    @property
    def order(self) -> int:
        return int(self.coeffs.size) - 1

    @property
    def degenerate(self) -> bool:
        return self.gain <= 0.0


@dataclass(frozen=True)
class AnalysisFrame:
    index: int
    time: float
    samples: NDArray[np.float64]


def hann_window(size: int) -> NDArray[np.float64]:
    return np.hanning(size)


def iter_frames(
    x: NDArray[np.floating], hop: int, sr: float, window: NDArray[np.floating]
) -> Iterator[AnalysisFrame]:
    """Yield one windowed frame per hop of the centre-padded signal."""

    if hop <= 0:
        raise ValueError("hop must be positive")
    win = np.asarray(window, dtype=np.float64).reshape(-1)
    if win.size < hop:
        raise ValueError("window must be at least one hop long")

    sig = np.asarray(x, dtype=np.float64).reshape(-1)
    pad = (win.size - hop) // 2
    padded = np.pad(sig, (pad, pad + win.size))
    n_frames = sig.size // hop
    for k in range(n_frames):
        start = k * hop
        frame = padded[start : start + win.size] * win
        yield AnalysisFrame(index=k, time=start / sr, samples=frame)


def autocorrelate(frame: NDArray[np.floating], max_lag: int) -> NDArray[np.float64]:
    """Biased autocorrelation for lags ``0..max_lag``."""

    x = np.asarray(frame, dtype=np.float64)
    r = np.zeros(max_lag + 1, dtype=np.float64)
    if x.size == 0:
        return r
    full = np.correlate(x, x, mode="full")[x.size - 1 :]
    n = min(full.size, max_lag + 1)
    r[:n] = full[:n]
    return r


def levinson_durbin(
    r: NDArray[np.floating], order: int, silence_threshold: float = 1e-10
) -> LPCModel:
    """Solve the normal equations for ``order`` predictor coefficients."""

    r = np.asarray(r, dtype=np.float64)
    if r.size < order + 1:
        raise ValueError(f"need {order + 1} autocorrelation lags, got {r.size}")

    a = np.zeros(order + 1, dtype=np.float64)
    if r[0] < silence_threshold:
        return LPCModel(coeffs=_error_filter(a), gain=0.0, silent=True)

    e = float(r[0])
    for i in range(1, order + 1):
        lam = (r[i] - np.dot(a[1:i], r[i - 1 : 0 : -1])) / e
        prev = a.copy()
        a[1:i] = prev[1:i] - lam * prev[i - 1 : 0 : -1]
        a[i] = lam
        e *= 1.0 - lam * lam
        if e <= 0.0:
            break

    return LPCModel(coeffs=_error_filter(a), gain=float(np.sqrt(max(e, 0.0))))


def _error_filter(a: NDArray[np.float64]) -> NDArray[np.float64]:
    coeffs = -a
    coeffs[0] = 1.0
    return coeffs


def frame_lpc(
    frame: NDArray[np.floating], order: int, silence_threshold: float = 1e-10
) -> LPCModel:
    return levinson_durbin(autocorrelate(frame, order), order, silence_threshold)
