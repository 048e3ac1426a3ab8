from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

FORMANT_NAMES: tuple[str, str, str] = ("F1", "F2", "F3")


class Method(str, Enum):
    LPC = "lpc"
    PHONEME_MAPPING = "phoneme-mapping"


@dataclass(frozen=True)
class SampleBuffer:
    """Captured PCM samples. The array is copied and locked read-only."""

    samples: NDArray[np.float64]
    sample_rate: float

    def __post_init__(self) -> None:
        data = np.array(self.samples, dtype=np.float64).reshape(-1)
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", float(self.sample_rate))

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.samples.size / self.sample_rate


@dataclass(frozen=True)
class FormantPoint:
    t: float
    freq: float
    amp: float


@dataclass(frozen=True)
class FormantTrack:
    name: str
    points: tuple[FormantPoint, ...]

    def __post_init__(self) -> None:
        points = tuple(self.points)
        for prev, cur in zip(points, points[1:]):
            if not cur.t > prev.t:
                raise ValueError(f"{self.name}: time must be strictly increasing")
        for p in points:
            if p.freq < 0:
                raise ValueError(f"{self.name}: negative frequency at t={p.t}")
        object.__setattr__(self, "points", points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[FormantPoint]:
        return iter(self.points)

    def times(self) -> NDArray[np.float64]:
        return np.array([p.t for p in self.points], dtype=np.float64)

    def frequencies(self) -> NDArray[np.float64]:
        return np.array([p.freq for p in self.points], dtype=np.float64)

    def amplitudes(self) -> NDArray[np.float64]:
        return np.array([p.amp for p in self.points], dtype=np.float64)


@dataclass(frozen=True)
class UtteranceTrajectory:
    total_duration: float
    tracks: tuple[FormantTrack, FormantTrack, FormantTrack]
    method: Method
    transcript: str = ""
    raw_audio: Optional[SampleBuffer] = field(default=None, compare=False)
    fallback_reason: Optional[str] = None

    def __post_init__(self) -> None:
        tracks = tuple(self.tracks)
        if len(tracks) != 3:
            raise ValueError("a trajectory carries exactly three formant tracks")
        if tuple(t.name for t in tracks) != FORMANT_NAMES:
            raise ValueError(f"tracks must be named {FORMANT_NAMES}")
        for track in tracks:
            if track.points and (
                track.points[0].t < 0 or track.points[-1].t > self.total_duration + 1e-9
            ):
                raise ValueError(f"{track.name} leaves [0, {self.total_duration}]")
        object.__setattr__(self, "tracks", tracks)
        object.__setattr__(self, "method", Method(self.method))

    def track(self, name: str) -> FormantTrack:
        for t in self.tracks:
            if t.name == name:
                return t
        raise KeyError(name)

    @property
    def f1(self) -> FormantTrack:
        return self.tracks[0]

    @property
    def f2(self) -> FormantTrack:
        return self.tracks[1]

    @property
    def f3(self) -> FormantTrack:
        return self.tracks[2]

    def to_dict(self, include_audio: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "totalDuration": self.total_duration,
            "tracks": {
                t.name: [{"t": p.t, "freq": p.freq, "amp": p.amp} for p in t.points]
                for t in self.tracks
            },
            "method": self.method.value,
            "transcript": self.transcript,
        }
        if self.fallback_reason is not None:
            out["fallbackReason"] = self.fallback_reason
        if include_audio and self.raw_audio is not None:
            out["rawAudio"] = {
                "samples": self.raw_audio.samples.tolist(),
                "sampleRate": self.raw_audio.sample_rate,
            }
        return out


def make_tracks(
    times: Sequence[float],
    freqs: NDArray[np.floating],
    amps: NDArray[np.floating],
) -> tuple[FormantTrack, FormantTrack, FormantTrack]:
    """Build F1..F3 tracks from ``(n_points, 3)`` frequency and amplitude arrays."""

    freqs = np.asarray(freqs, dtype=np.float64)
    amps = np.asarray(amps, dtype=np.float64)
    tracks = []
    for k, name in enumerate(FORMANT_NAMES):
        points = tuple(
            FormantPoint(float(t), float(freqs[i, k]), float(amps[i, k]))
            for i, t in enumerate(times)
        )
        tracks.append(FormantTrack(name, points))
    return tracks[0], tracks[1], tracks[2]
