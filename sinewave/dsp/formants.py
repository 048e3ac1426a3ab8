from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from sinewave.config import ExtractionConfig
from sinewave.dsp.lpc import LPCModel
from sinewave.dsp.roots import ComplexPair, Root, RootSet, polynomial_roots


@dataclass(frozen=True)
class FormantCandidate:
    frequency: float
    bandwidth: float
    magnitude: float


def pole_to_candidate(root: ComplexPair, gain: float, sr: float, floor: float = 0.01) -> FormantCandidate:
    """Read frequency, bandwidth and loudness off a single pole.

    Loudness comes from how close the pole sits to the unit circle, not
    from the frame energy.
    """

    rho = root.magnitude
    freq = root.angle * sr / (2.0 * math.pi)
    bandwidth = -math.log(rho) * sr / math.pi if rho > 0 else math.inf
    magnitude = gain / max(1.0 - rho, floor)
    return FormantCandidate(frequency=freq, bandwidth=bandwidth, magnitude=max(magnitude, 0.0))


def roots_to_candidates(
    roots: Sequence[Root], gain: float, sr: float, cfg: ExtractionConfig
) -> list[FormantCandidate]:
    """Convert poles to admissible formant candidates sorted by frequency."""

    out: list[FormantCandidate] = []
    for root in roots:
        if not isinstance(root, ComplexPair) or root.imag <= cfg.min_pole_imag:
            continue
        cand = pole_to_candidate(root, gain, sr, cfg.resonance_floor)
        if not cfg.min_formant_hz < cand.frequency < cfg.max_formant_hz:
            continue
        if not 0.0 < cand.bandwidth < cfg.max_bandwidth_hz:
            continue
        out.append(cand)
    out.sort(key=lambda c: c.frequency)
    return out


def select_formants(model: LPCModel, sr: float, cfg: ExtractionConfig) -> tuple[list[FormantCandidate], RootSet]:
    """Candidates for one frame; at most the first three are used as F1..F3."""

    if model.silent:
        return [], RootSet(())
    roots = polynomial_roots(model.coeffs, max_iter=cfg.max_qr_iterations, tol=cfg.deflation_tol)
    return roots_to_candidates(roots.roots, model.gain, sr, cfg), roots
