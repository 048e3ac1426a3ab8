from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from scipy.signal import lfilter

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _synth_vowel(
    formants: tuple[float, float, float] = (700.0, 1200.0, 2600.0),
    bandwidths: tuple[float, float, float] = (50.0, 110.0, 160.0),
    sr: int = 8000,
    duration: float = 0.5,
    seed: int = 1234,
) -> np.ndarray:
    """Noise through a glottal tilt and three resonators.

    The ``1 / (1 - 0.9 z^-1)`` tilt is exactly undone by the analyzer's
    pre-emphasis when ``sr`` matches the analysis rate.
    """

    rng = np.random.default_rng(seed)
    signal = lfilter([1.0], [1.0, -0.9], rng.standard_normal(int(sr * duration)))
    for freq, bw in zip(formants, bandwidths):
        r = np.exp(-np.pi * bw / sr)
        theta = 2 * np.pi * freq / sr
        a = np.array([1.0, -2.0 * r * np.cos(theta), r * r], dtype=np.float64)
        signal = lfilter([1.0 - r], a, signal)
    return 0.5 * signal / np.max(np.abs(signal))


@pytest.fixture
def synth_vowel() -> Callable[..., np.ndarray]:
    return _synth_vowel
