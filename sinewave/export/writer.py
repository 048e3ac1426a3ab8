from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pyarrow as pa
import pyarrow.parquet as pq

from sinewave.trajectory import (
    FORMANT_NAMES,
    FormantPoint,
    FormantTrack,
    Method,
    UtteranceTrajectory,
)

SCHEMA = pa.schema(
    [
        ("track", pa.string()),
        ("t", pa.float64()),
        ("freq_hz", pa.float32()),
        ("amp", pa.float32()),
        ("method", pa.string()),
        ("total_duration", pa.float64()),
        ("transcript", pa.string()),
    ]
)


def trajectory_rows(trajectory: UtteranceTrajectory) -> Iterable[Dict[str, Any]]:
    for track in trajectory.tracks:
        for point in track.points:
            yield {
                "track": track.name,
                "t": point.t,
                "freq_hz": point.freq,
                "amp": point.amp,
                "method": trajectory.method.value,
                "total_duration": trajectory.total_duration,
                "transcript": trajectory.transcript,
            }


def _normalize_rows(rows: Iterable[Dict[str, Any]]) -> pa.Table:
    normalized = []
    for row in rows:
        item: Dict[str, Any] = {}
        for field in SCHEMA.names:
            value = row.get(field)
            ftype = SCHEMA.field(field).type
            if value is None:
                item[field] = None
            elif ftype in (pa.float32(), pa.float64()):
                item[field] = float(value)
            else:
                item[field] = str(value)
        normalized.append(item)
    return pa.Table.from_pylist(normalized, schema=SCHEMA)


def write_parquet(path: str | Path, trajectory: UtteranceTrajectory) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    table = _normalize_rows(trajectory_rows(trajectory))
    pq.write_table(table, file_path)
    return file_path


def read_parquet(path: str | Path) -> UtteranceTrajectory:
    """Load a trajectory written by :func:`write_parquet` (raw audio is not stored)."""

    rows = pq.read_table(Path(path), schema=SCHEMA).to_pylist()
    if not rows:
        raise ValueError(f"{path}: no trajectory rows")

    points: Dict[str, List[FormantPoint]] = {name: [] for name in FORMANT_NAMES}
    for row in rows:
        points[row["track"]].append(FormantPoint(row["t"], row["freq_hz"], row["amp"]))
    tracks = tuple(
        FormantTrack(name, tuple(sorted(points[name], key=lambda p: p.t)))
        for name in FORMANT_NAMES
    )
    first = rows[0]
    return UtteranceTrajectory(
        total_duration=first["total_duration"],
        tracks=tracks,  # type: ignore[arg-type]
        method=Method(first["method"]),
        transcript=first["transcript"] or "",
    )


def write_json(path: str | Path, trajectory: UtteranceTrajectory, include_audio: bool = False) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as fh:
        json.dump(trajectory.to_dict(include_audio=include_audio), fh, ensure_ascii=False, indent=2)
    return file_path


def write_trajectory(path: str | Path, trajectory: UtteranceTrajectory) -> Path:
    """Pick the format from the file suffix (``.json`` or parquet)."""

    if Path(path).suffix.lower() == ".json":
        return write_json(path, trajectory)
    return write_parquet(path, trajectory)
