from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from sinewave.config import ExtractionConfig
from sinewave.dsp.formants import FormantCandidate
from sinewave.errors import DegenerateTrajectory


@dataclass
class SmoothingState:
    """Per-run formant memory carried from one frame to the next."""

    freqs: list[float]
    mags: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])

    @classmethod
    def seeded(cls, cfg: ExtractionConfig) -> "SmoothingState":
        return cls(freqs=[float(f) for f in cfg.seed_frequencies])


def smooth_frame(
    state: SmoothingState, candidates: Sequence[FormantCandidate], cfg: ExtractionConfig
) -> NDArray[np.float64]:
    """Fold one frame into ``state`` and return its relative levels for F1..F3.

    Slot ``k`` takes the ``k``-th lowest candidate. An empty slot decays its
    magnitude and holds its frequency.
    """

    alpha = cfg.smoothing
    for k in range(3):
        if k < len(candidates) and candidates[k].frequency > 0:
            state.freqs[k] = state.freqs[k] * (1.0 - alpha) + candidates[k].frequency * alpha
            state.mags[k] = state.mags[k] * (1.0 - alpha) + candidates[k].magnitude * alpha
        else:
            state.mags[k] *= cfg.decay

    peak = max(max(state.mags), cfg.magnitude_floor)
    return np.array([m / peak for m in state.mags], dtype=np.float64)


def normalize_levels(levels: NDArray[np.floating], cfg: ExtractionConfig) -> NDArray[np.float64]:
    """Scale ``(n_frames, 3)`` relative levels against the loudest point of the utterance.

    Levels are tier-weighted before the peak is taken; the ratio to that
    peak is compressed with ``cfg.compression`` and weighted once more, so
    F1 at the loudest frame lands exactly on 1.0.
    """

    lv = np.asarray(levels, dtype=np.float64)
    if lv.size == 0:
        raise DegenerateTrajectory("no frames to normalize")
    if not np.all(np.isfinite(lv)):
        raise DegenerateTrajectory("non-finite formant levels")
    weights = np.asarray(cfg.tier_weights, dtype=np.float64)
    weighted = lv * weights
    peak = float(np.max(weighted))
    if peak <= 0.0:
        raise DegenerateTrajectory("utterance has no formant energy")

    return np.power(np.clip(weighted / peak, 0.0, 1.0), cfg.compression) * weights
