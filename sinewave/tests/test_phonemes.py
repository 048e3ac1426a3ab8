from __future__ import annotations

import numpy as np
import pytest

from sinewave.config import ExtractionConfig
from sinewave.phonemes.mapper import (
    phonemes_to_trajectory,
    sample_times,
    spell_word,
    split_words,
    text_to_phonemes,
    text_to_trajectory,
)
from sinewave.phonemes.tables import (
    PHONEME_CLASS,
    PHONEME_FORMANTS,
    PRONUNCIATIONS,
    SPELLING_RULES,
    Phoneme,
    PhonemeClass,
    duration_of,
)
from sinewave.trajectory import Method

P = Phoneme


def test_hello_world_units() -> None:
    units = text_to_phonemes("hello world")
    assert [u.symbol for u in units] == [
        P.HH, P.AH, P.L, P.OW, P.SIL, P.W, P.ER, P.L, P.D,
    ]
    assert [u.duration for u in units] == pytest.approx(
        [0.04, 0.10, 0.07, 0.10, 0.06, 0.07, 0.10, 0.07, 0.05]
    )


def test_hello_world_duration() -> None:
    units = text_to_phonemes("hello world")
    traj = phonemes_to_trajectory(units)
    assert traj.total_duration == pytest.approx(sum(u.duration for u in units) + 0.04)
    assert traj.method is Method.PHONEME_MAPPING


def test_text_is_normalized() -> None:
    assert split_words("  Hello, WORLD!  don't ") == ["hello", "world", "don't"]
    assert [u.symbol for u in text_to_phonemes("Don't!")] == [P.D, P.OW, P.N, P.T]


@pytest.mark.parametrize(
    "word, expected",
    [
        ("night", [P.N, P.AY, P.T]),
        ("ship", [P.SH, P.IH, P.P]),
        ("back", [P.B, P.AE, P.K]),
        ("phone", [P.F, P.AA, P.N, P.EH]),
        ("r2d2", [P.R, P.D]),
        ("moon", [P.M, P.UW, P.N]),
    ],
)
def test_spelling_rules_are_greedy(word: str, expected: list) -> None:
    assert spell_word(word) == expected


def test_dictionary_wins_over_spelling() -> None:
    assert [u.symbol for u in text_to_phonemes("one")] == [P.W, P.AH, P.N]
    assert spell_word("one") != list(PRONUNCIATIONS["one"])


def test_tables_are_closed_and_read_only() -> None:
    assert set(PHONEME_FORMANTS) == set(Phoneme)
    assert set(PHONEME_CLASS) == set(Phoneme)
    assert all(isinstance(v, Phoneme) for v in SPELLING_RULES.values())
    with pytest.raises(TypeError):
        PHONEME_FORMANTS[P.AH] = (0, 0, 0)  # type: ignore[index]


def test_duration_classes() -> None:
    assert duration_of(P.AY) == 0.10
    assert duration_of(P.NG) == 0.07
    assert duration_of(P.ZH) == 0.05
    assert duration_of(P.S) == 0.04
    assert duration_of(P.SIL) == 0.04
    assert PHONEME_CLASS[P.HH] is PhonemeClass.UNVOICED


def test_trajectory_is_sampled_every_10ms() -> None:
    traj = text_to_trajectory("hello world")
    times = traj.f1.times()
    assert times[0] == 0.0
    assert times[-1] == traj.total_duration
    steps = np.diff(times)
    assert np.all(steps > 0)
    np.testing.assert_allclose(steps[:-1], 0.01, atol=1e-12)
    assert steps[-1] <= 0.01 + 1e-12
    for track in traj.tracks:
        np.testing.assert_array_equal(track.times(), times)


def test_trajectory_starts_and_ends_silent() -> None:
    traj = text_to_trajectory("hello world")
    for track in traj.tracks:
        assert track.points[0].amp == 0.0
        assert track.points[-1].amp == pytest.approx(0.0)
        assert track.points[0].freq == pytest.approx(track.points[-1].freq)


def test_vowel_targets_are_reached() -> None:
    cfg = ExtractionConfig()
    units = text_to_phonemes("a")
    assert [u.symbol for u in units] == [P.AH]
    traj = phonemes_to_trajectory(units, cfg)

    # AH centre sits at 0.02 + 0.05 = 0.07 s, a sample point
    idx = int(np.argmin(np.abs(traj.f1.times() - 0.07)))
    assert traj.f1.points[idx].freq == pytest.approx(640.0)
    assert traj.f2.points[idx].freq == pytest.approx(1190.0)
    assert traj.f3.points[idx].freq == pytest.approx(2390.0)
    assert traj.f1.points[idx].amp == pytest.approx(1.0)
    assert traj.f2.points[idx].amp == pytest.approx(0.7)
    assert traj.f3.points[idx].amp == pytest.approx(0.4)


def test_unvoiced_targets_are_silent() -> None:
    traj = text_to_trajectory("s")
    # the lone S centre is at 0.04 s
    idx = int(np.argmin(np.abs(traj.f1.times() - 0.04)))
    assert traj.f1.points[idx].amp == pytest.approx(0.0)
    assert traj.f1.points[idx].freq == pytest.approx(400.0)


def test_easing_is_cosine_shaped() -> None:
    traj = text_to_trajectory("a")
    # between the leading silence (t=0) and the AH target (t=0.07)
    # at t=0.03 the eased weight is 0.5 - 0.5*cos(pi*3/7)
    w = 0.5 - 0.5 * np.cos(np.pi * 0.03 / 0.07)
    point = traj.f1.points[3]
    assert point.t == pytest.approx(0.03)
    assert point.freq == pytest.approx(400.0 + w * (640.0 - 400.0))
    assert point.amp == pytest.approx(w)


def test_sample_times_end_on_total() -> None:
    grid = sample_times(0.345, 0.01)
    assert grid[-1] == 0.345
    assert grid[-2] == pytest.approx(0.34)
    exact = sample_times(0.35, 0.01)
    assert exact[-1] == 0.35
    assert exact[-2] == pytest.approx(0.34)


def test_fallback_is_deterministic() -> None:
    a = text_to_trajectory("the quick brown fox")
    b = text_to_trajectory("the quick brown fox")
    assert a == b
