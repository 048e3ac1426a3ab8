from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from sinewave.config import ExtractionConfig
from sinewave.phonemes.tables import (
    MAX_SPELLING,
    PHONEME_FORMANTS,
    PRONUNCIATIONS,
    SPELLING_RULES,
    Phoneme,
    duration_of,
    is_voiced,
)
from sinewave.trajectory import Method, UtteranceTrajectory, make_tracks

_STRIP = re.compile(r"[^\w\s']", re.ASCII)
NEUTRAL_FORMANTS = (400.0, 1500.0, 2500.0)


@dataclass(frozen=True)
class PhonemeUnit:
    symbol: Phoneme
    duration: float


@dataclass(frozen=True)
class _Target:
    time: float
    freqs: tuple[float, float, float]
    amp: float


def split_words(text: str) -> list[str]:
    return _STRIP.sub("", text.lower()).split()


def spell_word(word: str) -> list[Phoneme]:
    """Greedy left-to-right letter rules, longest spelling first."""

    out: list[Phoneme] = []
    i = 0
    while i < len(word):
        for size in range(min(MAX_SPELLING, len(word) - i), 0, -1):
            phoneme = SPELLING_RULES.get(word[i : i + size])
            if phoneme is not None:
                out.append(phoneme)
                i += size
                break
        else:
            # digits, apostrophes and other unmapped characters are silent
            i += 1
    return out


def word_to_phonemes(word: str) -> list[Phoneme]:
    known = PRONUNCIATIONS.get(word)
    if known is not None:
        return list(known)
    return spell_word(word)


def text_to_phonemes(text: str, cfg: Optional[ExtractionConfig] = None) -> list[PhonemeUnit]:
    cfg = cfg or ExtractionConfig()
    words = split_words(text)
    units: list[PhonemeUnit] = []
    for i, word in enumerate(words):
        units.extend(PhonemeUnit(ph, duration_of(ph)) for ph in word_to_phonemes(word))
        if i < len(words) - 1:
            units.append(PhonemeUnit(Phoneme.SIL, cfg.word_gap))
    return units


def _targets(units: Sequence[PhonemeUnit], edge: float) -> tuple[list[_Target], float]:
    targets = [_Target(0.0, NEUTRAL_FORMANTS, 0.0)]
    now = edge
    for unit in units:
        formants = PHONEME_FORMANTS[unit.symbol]
        voiced = is_voiced(unit.symbol)
        f1, f2, f3 = (float(f) or n for f, n in zip(formants, NEUTRAL_FORMANTS))
        freqs = (f1, f2, f3)
        targets.append(_Target(now + unit.duration / 2.0, freqs, 1.0 if voiced else 0.0))
        now += unit.duration
    total = now + edge
    targets.append(_Target(total, NEUTRAL_FORMANTS, 0.0))
    return targets, total


def sample_times(total: float, interval: float) -> np.ndarray:
    """Regular grid over ``[0, total]`` whose last point is exactly ``total``."""

    n = int(math.floor(total / interval + 1e-9))
    grid = np.arange(n + 1, dtype=np.float64) * interval
    grid = grid[grid < total - 1e-9]
    return np.append(grid, total)


def phonemes_to_trajectory(
    units: Sequence[PhonemeUnit],
    cfg: Optional[ExtractionConfig] = None,
    transcript: str = "",
) -> UtteranceTrajectory:
    """Glide between per-phoneme formant targets with cosine easing."""

    cfg = cfg or ExtractionConfig()
    targets, total = _targets(units, cfg.edge_silence)
    times = sample_times(total, cfg.trajectory_interval)

    knots = np.array([tg.time for tg in targets])
    tgt_freqs = np.array([tg.freqs for tg in targets], dtype=np.float64)
    tgt_amps = np.array([tg.amp for tg in targets], dtype=np.float64)

    # segment j spans knots[j] <= t < knots[j + 1]
    seg = np.clip(np.searchsorted(knots, times, side="right") - 1, 0, len(knots) - 2)
    span = knots[seg + 1] - knots[seg]
    alpha = np.where(span > 0, (times - knots[seg]) / np.where(span > 0, span, 1.0), 0.0)
    alpha = np.clip(alpha, 0.0, 1.0)
    eased = 0.5 - 0.5 * np.cos(alpha * np.pi)

    freqs = tgt_freqs[seg] + eased[:, None] * (tgt_freqs[seg + 1] - tgt_freqs[seg])
    amp = tgt_amps[seg] + eased * (tgt_amps[seg + 1] - tgt_amps[seg])
    amps = amp[:, None] * np.asarray(cfg.tier_weights, dtype=np.float64)

    return UtteranceTrajectory(
        total_duration=float(total),
        tracks=make_tracks(times.tolist(), freqs, amps),
        method=Method.PHONEME_MAPPING,
        transcript=transcript,
    )


def text_to_trajectory(text: str, cfg: Optional[ExtractionConfig] = None) -> UtteranceTrajectory:
    cfg = cfg or ExtractionConfig()
    return phonemes_to_trajectory(text_to_phonemes(text, cfg), cfg, transcript=text)
