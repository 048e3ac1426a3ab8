"""Chooses between waveform analysis and the text-driven fallback.

``FormantExtractor.generate`` always ends in exactly one trajectory. The
LPC attempt is reduced to a tagged outcome first, so the fallback decision
happens in one place instead of in nested handlers.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from sinewave.analyzer import analyze_waveform
from sinewave.config import ExtractionConfig
from sinewave.errors import (
    AnalysisError,
    EmptyInput,
    WaveformSourceError,
    WaveformSourceTimeout,
    WaveformSourceUnavailable,
)
from sinewave.phonemes.mapper import phonemes_to_trajectory, text_to_phonemes
from sinewave.sources import WaveformSource
from sinewave.trajectory import SampleBuffer, UtteranceTrajectory

log = logging.getLogger(__name__)

# blocking sources; asyncio.run joins the default executor on exit
_SOURCE_POOL = ThreadPoolExecutor(max_workers=4, thread_name_prefix="sinewave-source")


class ExtractionState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    SUCCEEDED = "succeeded"
    FELL_BACK = "fell_back"


@dataclass(frozen=True)
class LpcSucceeded:
    trajectory: UtteranceTrajectory


@dataclass(frozen=True)
class LpcFellBack:
    reason: str
    raw_audio: Optional[SampleBuffer] = None


LpcOutcome = Union[LpcSucceeded, LpcFellBack]


class FormantExtractor:
    """Single-flight front end: the newest ``generate`` call owns the state."""

    def __init__(
        self,
        source: Optional[WaveformSource] = None,
        cfg: Optional[ExtractionConfig] = None,
    ) -> None:
        self.source = source
        self.cfg = (cfg or ExtractionConfig()).validate()
        self.state = ExtractionState.IDLE
        self.trajectory: Optional[UtteranceTrajectory] = None
        self._request_id = 0

    async def generate(
        self,
        text: str,
        samples: Optional[NDArray[np.floating]] = None,
        sample_rate: Optional[float] = None,
    ) -> UtteranceTrajectory:
        """Produce a trajectory for ``text``, analyzing audio when there is any.

        ``samples``/``sample_rate`` take precedence over the configured
        source. Only ``EmptyInput`` is raised.
        """

        text = text or ""
        has_waveform = samples is not None or self.source is not None
        if not text.strip() and not has_waveform:
            raise EmptyInput("nothing to analyze: no text and no waveform")

        self._request_id += 1
        request = self._request_id
        self._set_state(request, ExtractionState.ANALYZING)

        if has_waveform:
            outcome = await self._attempt_lpc(text, samples, sample_rate)
        else:
            outcome = LpcFellBack("no waveform source")

        if isinstance(outcome, LpcSucceeded):
            result = outcome.trajectory
            final = ExtractionState.SUCCEEDED
            log.info("lpc analysis: %.3f s, %d frames", result.total_duration, len(result.f1))
        else:
            log.warning("falling back to phoneme mapping: %s", outcome.reason)
            try:
                result = self._fallback(text, outcome)
            except EmptyInput:
                self._set_state(request, ExtractionState.IDLE)
                raise
            final = ExtractionState.FELL_BACK

        if request == self._request_id:
            self.trajectory = result
            self.state = final
        else:
            log.debug("request %d superseded by %d; result not kept", request, self._request_id)
        return result

    def generate_sync(
        self,
        text: str,
        samples: Optional[NDArray[np.floating]] = None,
        sample_rate: Optional[float] = None,
    ) -> UtteranceTrajectory:
        return asyncio.run(self.generate(text, samples, sample_rate))

    def _set_state(self, request: int, state: ExtractionState) -> None:
        if request == self._request_id:
            self.state = state

    async def _attempt_lpc(
        self,
        text: str,
        samples: Optional[NDArray[np.floating]],
        sample_rate: Optional[float],
    ) -> LpcOutcome:
        try:
            if samples is not None:
                if sample_rate is None:
                    raise WaveformSourceUnavailable("samples given without a sample rate")
                buffer = SampleBuffer(samples, sample_rate)
            else:
                buffer = await self._capture(text)
        except (WaveformSourceError, TypeError, ValueError) as exc:
            return LpcFellBack(f"{type(exc).__name__}: {exc}")

        try:
            return LpcSucceeded(analyze_waveform(buffer, self.cfg, transcript=text))
        except AnalysisError as exc:
            return LpcFellBack(f"{type(exc).__name__}: {exc}", raw_audio=buffer)
        except Exception as exc:
            log.exception("waveform analysis failed unexpectedly")
            return LpcFellBack(f"{type(exc).__name__}: {exc}", raw_audio=buffer)

    async def _capture(self, text: str) -> SampleBuffer:
        if self.source is None:
            raise WaveformSourceUnavailable("no waveform source configured")
        timeout = self.cfg.source_timeout
        try:
            samples, sr = await asyncio.wait_for(self._call_source(text), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise WaveformSourceTimeout(timeout) from exc
        except WaveformSourceError:
            raise
        except Exception as exc:
            raise WaveformSourceUnavailable(f"{type(exc).__name__}: {exc}") from exc

        buffer = SampleBuffer(samples, sr)
        if len(buffer) == 0:
            raise WaveformSourceUnavailable("waveform source returned no samples")
        return buffer

    async def _call_source(self, text: str):
        synthesize = self.source.synthesize  # type: ignore[union-attr]
        if inspect.iscoroutinefunction(synthesize):
            return await synthesize(text)
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(_SOURCE_POOL, synthesize, text)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _fallback(self, text: str, outcome: LpcFellBack) -> UtteranceTrajectory:
        units = text_to_phonemes(text, self.cfg)
        if not text.strip():
            raise EmptyInput("no text to fall back on and waveform analysis failed")
        trajectory = phonemes_to_trajectory(units, self.cfg, transcript=text)
        return UtteranceTrajectory(
            total_duration=trajectory.total_duration,
            tracks=trajectory.tracks,
            method=trajectory.method,
            transcript=text,
            raw_audio=outcome.raw_audio,
            fallback_reason=outcome.reason,
        )
