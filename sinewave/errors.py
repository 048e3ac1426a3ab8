from __future__ import annotations


class SinewaveError(Exception):
    """Base class for every error raised by the extraction engine."""


class AnalysisError(SinewaveError):
    """The LPC path could not produce a usable trajectory."""


class SignalTooShort(AnalysisError):
    def __init__(self, n_samples: int, window_size: int) -> None:
        super().__init__(
            f"signal has {n_samples} samples after resampling, "
            f"need at least {window_size}"
        )
        self.n_samples = n_samples
        self.window_size = window_size


class InvalidSignal(AnalysisError):
    """Sample rate or sample values cannot be analyzed."""


class DegenerateTrajectory(AnalysisError):
    """Every analyzed frame came out silent or non-finite."""


class WaveformSourceError(SinewaveError):
    """The external waveform source did not deliver audio."""


class WaveformSourceUnavailable(WaveformSourceError):
    pass


class WaveformSourceTimeout(WaveformSourceError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"waveform source did not answer within {timeout:g} s")
        self.timeout = timeout


class EmptyInput(SinewaveError, ValueError):
    """Neither text nor a waveform was given."""
