"""Static lookup data for the text-driven fallback.

Formant targets are average adult values after Peterson & Barney (1952).
Every table is read-only and keyed by :class:`Phoneme`.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Phoneme(str, Enum):
    # vowels
    IY = "IY"
    IH = "IH"
    EH = "EH"
    AE = "AE"
    AA = "AA"
    AO = "AO"
    UH = "UH"
    UW = "UW"
    AH = "AH"
    ER = "ER"
    # diphthongs
    EY = "EY"
    AY = "AY"
    OY = "OY"
    AW = "AW"
    OW = "OW"
    # glides and liquids
    W = "W"
    Y = "Y"
    R = "R"
    L = "L"
    # nasals
    M = "M"
    N = "N"
    NG = "NG"
    # voiced fricatives
    V = "V"
    DH = "DH"
    Z = "Z"
    ZH = "ZH"
    # voiced stops and affricate
    B = "B"
    D = "D"
    G = "G"
    JH = "JH"
    # unvoiced
    P = "P"
    T = "T"
    K = "K"
    F = "F"
    TH = "TH"
    S = "S"
    SH = "SH"
    CH = "CH"
    HH = "HH"
    SIL = "SIL"


class PhonemeClass(str, Enum):
    VOWEL = "vowel"
    SONORANT = "sonorant"
    VOICED_OBSTRUENT = "voiced_obstruent"
    UNVOICED = "unvoiced"


P = Phoneme

# (F1, F2, F3) in Hz; zeros mean no voicing.
PHONEME_FORMANTS: Mapping[Phoneme, tuple[float, float, float]] = MappingProxyType(
    {
        P.IY: (270, 2290, 3010),
        P.IH: (390, 1990, 2550),
        P.EH: (530, 1840, 2480),
        P.AE: (660, 1720, 2410),
        P.AA: (730, 1090, 2440),
        P.AO: (570, 840, 2410),
        P.UH: (440, 1020, 2240),
        P.UW: (300, 870, 2240),
        P.AH: (640, 1190, 2390),
        P.ER: (490, 1350, 1690),
        # diphthongs use their onset
        P.EY: (450, 2000, 2600),
        P.AY: (750, 1200, 2600),
        P.OY: (550, 900, 2500),
        P.AW: (750, 1200, 2500),
        P.OW: (500, 900, 2500),
        P.W: (350, 700, 2400),
        P.Y: (300, 2200, 3000),
        P.R: (420, 1300, 1600),
        P.L: (400, 1100, 2600),
        P.M: (300, 1200, 2500),
        P.N: (300, 1700, 2500),
        P.NG: (350, 2000, 2700),
        P.V: (300, 1300, 2400),
        P.DH: (350, 1600, 2600),
        P.Z: (350, 1800, 2600),
        P.ZH: (350, 2000, 2600),
        P.B: (350, 1100, 2400),
        P.D: (350, 1700, 2600),
        P.G: (350, 2000, 2600),
        P.JH: (350, 2200, 2800),
        P.P: (0, 0, 0),
        P.T: (0, 0, 0),
        P.K: (0, 0, 0),
        P.F: (0, 0, 0),
        P.TH: (0, 0, 0),
        P.S: (0, 0, 0),
        P.SH: (0, 0, 0),
        P.CH: (0, 0, 0),
        P.HH: (0, 0, 0),
        P.SIL: (0, 0, 0),
    }
)

_CLASS_MEMBERS = {
    PhonemeClass.VOWEL: (
        P.IY, P.IH, P.EH, P.AE, P.AA, P.AO, P.UH, P.UW, P.AH, P.ER,
        P.EY, P.AY, P.OY, P.AW, P.OW,
    ),
    PhonemeClass.SONORANT: (P.M, P.N, P.NG, P.L, P.R, P.W, P.Y),
    PhonemeClass.VOICED_OBSTRUENT: (P.V, P.DH, P.Z, P.ZH, P.B, P.D, P.G, P.JH),
}

PHONEME_CLASS: Mapping[Phoneme, PhonemeClass] = MappingProxyType(
    {
        ph: next(
            (cls for cls, members in _CLASS_MEMBERS.items() if ph in members),
            PhonemeClass.UNVOICED,
        )
        for ph in Phoneme
    }
)

CLASS_DURATION: Mapping[PhonemeClass, float] = MappingProxyType(
    {
        PhonemeClass.VOWEL: 0.10,
        PhonemeClass.SONORANT: 0.07,
        PhonemeClass.VOICED_OBSTRUENT: 0.05,
        PhonemeClass.UNVOICED: 0.04,
    }
)

# Longest spellings are tried first; see ``mapper.spell_word``.
SPELLING_RULES: Mapping[str, Phoneme] = MappingProxyType(
    {
        "igh": P.AY,
        "th": P.TH, "sh": P.SH, "ch": P.CH, "ng": P.NG, "wh": P.W,
        "ph": P.F, "ck": P.K, "ee": P.IY, "ea": P.IY, "oo": P.UW,
        "ou": P.AW, "ow": P.OW, "oi": P.OY, "oy": P.OY, "ai": P.EY,
        "ay": P.EY, "ie": P.IY, "au": P.AO, "aw": P.AO,
        "er": P.ER, "ir": P.ER, "ur": P.ER, "or": P.AO, "ar": P.AA,
        "a": P.AE, "e": P.EH, "i": P.IH, "o": P.AA, "u": P.AH,
        "b": P.B, "c": P.K, "d": P.D, "f": P.F, "g": P.G,
        "h": P.HH, "j": P.JH, "k": P.K, "l": P.L, "m": P.M,
        "n": P.N, "p": P.P, "q": P.K, "r": P.R, "s": P.S,
        "t": P.T, "v": P.V, "w": P.W, "x": P.K, "y": P.Y, "z": P.Z,
    }
)

MAX_SPELLING = max(len(k) for k in SPELLING_RULES)


def _word(*symbols: Phoneme) -> tuple[Phoneme, ...]:
    return tuple(symbols)


PRONUNCIATIONS: Mapping[str, tuple[Phoneme, ...]] = MappingProxyType(
    {
        "the": _word(P.DH, P.AH),
        "a": _word(P.AH),
        "an": _word(P.AE, P.N),
        "is": _word(P.IH, P.Z),
        "are": _word(P.AA, P.R),
        "was": _word(P.W, P.AH, P.Z),
        "were": _word(P.W, P.ER),
        "where": _word(P.W, P.EH, P.R),
        "what": _word(P.W, P.AH, P.T),
        "when": _word(P.W, P.EH, P.N),
        "why": _word(P.W, P.AY),
        "how": _word(P.HH, P.AW),
        "you": _word(P.Y, P.UW),
        "your": _word(P.Y, P.AO, P.R),
        "year": _word(P.Y, P.IH, P.R),
        "ago": _word(P.AH, P.G, P.OW),
        "to": _word(P.T, P.UW),
        "do": _word(P.D, P.UW),
        "go": _word(P.G, P.OW),
        "no": _word(P.N, P.OW),
        "so": _word(P.S, P.OW),
        "of": _word(P.AH, P.V),
        "for": _word(P.F, P.AO, P.R),
        "with": _word(P.W, P.IH, P.TH),
        "this": _word(P.DH, P.IH, P.S),
        "that": _word(P.DH, P.AE, P.T),
        "have": _word(P.HH, P.AE, P.V),
        "has": _word(P.HH, P.AE, P.Z),
        "had": _word(P.HH, P.AE, P.D),
        "be": _word(P.B, P.IY),
        "been": _word(P.B, P.IH, P.N),
        "will": _word(P.W, P.IH, P.L),
        "would": _word(P.W, P.UH, P.D),
        "could": _word(P.K, P.UH, P.D),
        "should": _word(P.SH, P.UH, P.D),
        "can": _word(P.K, P.AE, P.N),
        "from": _word(P.F, P.R, P.AH, P.M),
        "they": _word(P.DH, P.EY),
        "their": _word(P.DH, P.EH, P.R),
        "there": _word(P.DH, P.EH, P.R),
        "here": _word(P.HH, P.IH, P.R),
        "hello": _word(P.HH, P.AH, P.L, P.OW),
        "world": _word(P.W, P.ER, P.L, P.D),
        "speech": _word(P.S, P.P, P.IY, P.CH),
        "sound": _word(P.S, P.AW, P.N, P.D),
        "hear": _word(P.HH, P.IH, P.R),
        "listen": _word(P.L, P.IH, P.S, P.AH, P.N),
        "voice": _word(P.V, P.OY, P.S),
        "say": _word(P.S, P.EY),
        "said": _word(P.S, P.EH, P.D),
        "word": _word(P.W, P.ER, P.D),
        "words": _word(P.W, P.ER, P.D, P.Z),
        "one": _word(P.W, P.AH, P.N),
        "two": _word(P.T, P.UW),
        "three": _word(P.TH, P.R, P.IY),
        "i": _word(P.AY),
        "my": _word(P.M, P.AY),
        "me": _word(P.M, P.IY),
        "we": _word(P.W, P.IY),
        "he": _word(P.HH, P.IY),
        "she": _word(P.SH, P.IY),
        "it": _word(P.IH, P.T),
        "not": _word(P.N, P.AA, P.T),
        "don't": _word(P.D, P.OW, P.N, P.T),
        "know": _word(P.N, P.OW),
        "think": _word(P.TH, P.IH, P.NG, P.K),
        "like": _word(P.L, P.AY, P.K),
        "just": _word(P.JH, P.AH, P.S, P.T),
        "time": _word(P.T, P.AY, P.M),
        "good": _word(P.G, P.UH, P.D),
        "new": _word(P.N, P.UW),
        "first": _word(P.F, P.ER, P.S, P.T),
        "last": _word(P.L, P.AE, P.S, P.T),
        "long": _word(P.L, P.AO, P.NG),
        "great": _word(P.G, P.R, P.EY, P.T),
        "little": _word(P.L, P.IH, P.T, P.AH, P.L),
        "own": _word(P.OW, P.N),
        "other": _word(P.AH, P.DH, P.ER),
        "old": _word(P.OW, P.L, P.D),
        "right": _word(P.R, P.AY, P.T),
        "big": _word(P.B, P.IH, P.G),
        "high": _word(P.HH, P.AY),
        "small": _word(P.S, P.M, P.AO, P.L),
        "next": _word(P.N, P.EH, P.K, P.S, P.T),
        "early": _word(P.ER, P.L, P.IY),
        "young": _word(P.Y, P.AH, P.NG),
        "few": _word(P.F, P.Y, P.UW),
        "bad": _word(P.B, P.AE, P.D),
        "same": _word(P.S, P.EY, P.M),
        "quick": _word(P.K, P.W, P.IH, P.K),
        "brown": _word(P.B, P.R, P.AW, P.N),
        "fox": _word(P.F, P.AA, P.K, P.S),
    }
)


def is_voiced(phoneme: Phoneme) -> bool:
    return PHONEME_FORMANTS[phoneme][0] > 0


def duration_of(phoneme: Phoneme) -> float:
    return CLASS_DURATION[PHONEME_CLASS[phoneme]]
