from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, get_args, get_origin, get_type_hints

import yaml


@dataclass(frozen=True)
class ExtractionConfig:
    # preprocessing
    analysis_rate: int = 8000
    pre_emphasis: float = 0.9
    # framing / LPC
    hop_size: int = 256
    lpc_order: int = 12
    silence_threshold: float = 1e-10
    # root solver
    max_qr_iterations: int = 50
    deflation_tol: float = 1e-10
    # formant selection
    min_pole_imag: float = 0.001
    min_formant_hz: float = 90.0
    max_formant_hz: float = 4000.0
    max_bandwidth_hz: float = 600.0
    resonance_floor: float = 0.01
    # smoothing / normalization
    smoothing: float = 0.3
    decay: float = 0.8
    magnitude_floor: float = 0.001
    seed_frequencies: tuple[float, float, float] = (500.0, 1500.0, 2500.0)
    tier_weights: tuple[float, float, float] = (1.0, 0.7, 0.4)
    compression: float = 0.6
    # phoneme fallback
    trajectory_interval: float = 0.01
    word_gap: float = 0.06
    edge_silence: float = 0.02
    # waveform source
    source_timeout: float = 10.0

    @property
    def window_size(self) -> int:
        return 2 * self.hop_size

    def validate(self) -> "ExtractionConfig":
        if self.analysis_rate <= 0:
            raise ValueError("analysis_rate must be positive")
        if self.hop_size <= 0:
            raise ValueError("hop_size must be positive")
        if not 1 <= self.lpc_order < self.window_size:
            raise ValueError("lpc_order must be in [1, window_size)")
        if self.max_qr_iterations <= 0:
            raise ValueError("max_qr_iterations must be positive")
        if not 0.0 < self.smoothing <= 1.0:
            raise ValueError("smoothing must be in (0, 1]")
        if not 0.0 <= self.decay <= 1.0:
            raise ValueError("decay must be in [0, 1]")
        if not 0.0 < self.min_formant_hz < self.max_formant_hz:
            raise ValueError("formant frequency limits are inverted")
        if self.max_formant_hz > self.analysis_rate / 2:
            raise ValueError("max_formant_hz lies above the analysis Nyquist")
        if self.max_bandwidth_hz <= 0:
            raise ValueError("max_bandwidth_hz must be positive")
        if self.resonance_floor <= 0 or self.magnitude_floor <= 0:
            raise ValueError("floors must be positive")
        if self.compression <= 0:
            raise ValueError("compression must be positive")
        if any(w <= 0 for w in self.tier_weights):
            raise ValueError("tier_weights must be positive")
        if self.trajectory_interval <= 0:
            raise ValueError("trajectory_interval must be positive")
        if self.word_gap < 0 or self.edge_silence < 0:
            raise ValueError("silences cannot be negative")
        if self.source_timeout <= 0:
            raise ValueError("source_timeout must be positive")
        return self


@lru_cache(maxsize=None)
def _field_types() -> Dict[str, Any]:
    return get_type_hints(ExtractionConfig)


def _coerce(field_name: str, value: Any) -> Any:
    typ = _field_types()[field_name]
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    if typ is str:
        return str(value)
    if typ is bool:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if get_origin(typ) is tuple:
        args = get_args(typ)
        if not isinstance(value, (list, tuple)) or len(value) != len(args):
            raise ValueError(f"{field_name} expects {len(args)} values, got {value!r}")
        return tuple(arg(v) for arg, v in zip(args, value))
    return value


def config_from_dict(data: Dict[str, Any]) -> ExtractionConfig:
    known = {f.name for f in fields(ExtractionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    coerced = {name: _coerce(name, value) for name, value in data.items()}
    return ExtractionConfig(**coerced).validate()


def save_preset(path: str | Path, cfg: ExtractionConfig) -> None:
    data = asdict(cfg)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = list(value)
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, allow_unicode=True, sort_keys=False)


def load_preset(path: str | Path) -> ExtractionConfig:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(file_path)

    with file_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: preset must be a mapping")
    return config_from_dict(data)
