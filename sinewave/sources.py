"""Adapters for external waveform producers (TTS engines, recordings).

Every source answers ``synthesize(text)`` with ``(samples, sample_rate)``,
either directly or as an awaitable. Failures surface as
``WaveformSourceUnavailable`` so the caller can fall back uniformly.
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np
import soundfile as sf
from numpy.typing import NDArray

from sinewave.errors import WaveformSourceUnavailable

log = logging.getLogger(__name__)

Waveform = Tuple[NDArray[np.floating], float]


@runtime_checkable
class WaveformSource(Protocol):
    def synthesize(self, text: str) -> Union[Waveform, Awaitable[Waveform]]: ...


def to_mono(data: NDArray[np.floating]) -> NDArray[np.float64]:
    x = np.asarray(data, dtype=np.float64)
    if x.ndim == 2:
        x = x.mean(axis=1)
    return x.reshape(-1)


def decode_wav_bytes(data: bytes) -> Waveform:
    """Decode an in-memory WAV (or any libsndfile format) to mono floats."""

    if not data:
        raise WaveformSourceUnavailable("waveform source produced no bytes")
    try:
        samples, sr = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, TypeError) as exc:
        raise WaveformSourceUnavailable(f"undecodable audio: {exc}") from exc
    return to_mono(samples), float(sr)


class CallableSource:
    """Wrap a plain or ``async`` function ``fn(text) -> (samples, sr)``."""

    def __init__(self, fn: Callable[[str], Any]) -> None:
        self.fn = fn

    def synthesize(self, text: str) -> Union[Waveform, Awaitable[Waveform]]:
        return self.fn(text)


class WavFileSource:
    """Serve a fixed recording regardless of the requested text."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def synthesize(self, text: str) -> Waveform:
        if not self.path.exists():
            raise WaveformSourceUnavailable(f"no such audio file: {self.path}")
        try:
            samples, sr = sf.read(str(self.path), dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError) as exc:
            raise WaveformSourceUnavailable(f"cannot read {self.path}: {exc}") from exc
        return to_mono(samples), float(sr)


class CommandSource:
    """Run an external TTS command that writes a WAV file to stdout.

    ``{text}`` inside any argument is replaced by the requested text, e.g.
    ``["espeak-ng", "--stdout", "{text}"]``.
    """

    def __init__(self, argv: Sequence[str]) -> None:
        if not argv:
            raise ValueError("argv must name a command")
        self.argv = list(argv)

    def command_for(self, text: str) -> list[str]:
        return [arg.replace("{text}", text) for arg in self.argv]

    async def synthesize(self, text: str) -> Waveform:
        cmd = self.command_for(text)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise WaveformSourceUnavailable(f"cannot start {cmd[0]}: {exc}") from exc

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", "replace").strip()
            raise WaveformSourceUnavailable(
                f"{cmd[0]} exited with {proc.returncode}: {detail}"
            )
        log.debug("%s produced %d bytes", cmd[0], len(stdout))
        return decode_wav_bytes(stdout)
