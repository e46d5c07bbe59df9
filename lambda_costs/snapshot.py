"""
JSON snapshot of collected function reports.

Downloading a day of logs is slow, so the aggregates are written to
``{account_id}-{region}.json`` and reused on the next run. Durations are stored
as integer nanoseconds.
"""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

from .cost_model import FunctionAggregate
from .exceptions import SetupError
from .report_parser import Measurement

NANOSECONDS_PER_MICROSECOND = 1_000


def snapshot_file_name(account_id: str, region: str) -> str:
    return f"{account_id}-{region}.json"


def _duration_to_ns(value: timedelta) -> int:
    return (
        (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    ) * NANOSECONDS_PER_MICROSECOND


def _ns_to_duration(value) -> timedelta:
    return timedelta(microseconds=int(value) / NANOSECONDS_PER_MICROSECOND)


def measurement_to_dict(measurement: Measurement) -> dict:
    return {
        "requestId": measurement.request_id,
        "duration": _duration_to_ns(measurement.duration),
        "billedDuration": _duration_to_ns(measurement.billed_duration),
        "initDuration": _duration_to_ns(measurement.init_duration),
        "memorySize": measurement.memory_size,
        "maxMemoryUsed": measurement.max_memory_used,
        "isColdStart": measurement.is_cold_start,
    }


def measurement_from_dict(item: dict) -> Measurement:
    return Measurement(
        request_id=item.get("requestId", ""),
        duration=_ns_to_duration(item.get("duration", 0)),
        billed_duration=_ns_to_duration(item.get("billedDuration", 0)),
        init_duration=_ns_to_duration(item.get("initDuration", 0)),
        memory_size=int(item.get("memorySize", 0)),
        max_memory_used=int(item.get("maxMemoryUsed", 0)),
        is_cold_start=bool(item.get("isColdStart", False)),
    )


def aggregates_to_json(aggregates: list[FunctionAggregate]) -> list[dict]:
    return [
        {
            "name": aggregate.name,
            "architecture": aggregate.architecture,
            "reports": [measurement_to_dict(m) for m in aggregate.measurements],
        }
        for aggregate in aggregates
    ]


def aggregates_from_json(payload) -> list[FunctionAggregate]:
    """
    Rebuild aggregates from a decoded snapshot document.

    Raises:
        SetupError: If the document is not a list of function objects
    """
    if not isinstance(payload, list):
        raise SetupError("Snapshot must contain a JSON array of functions")
    aggregates = []
    for item in payload:
        if not isinstance(item, dict) or "name" not in item:
            raise SetupError("Snapshot item missing 'name' key")
        reports = item.get("reports") or []
        aggregates.append(
            FunctionAggregate(
                name=item["name"],
                architecture=item.get("architecture", ""),
                measurements=[measurement_from_dict(r) for r in reports],
            )
        )
    return aggregates


def save_snapshot(path: Path, aggregates: list[FunctionAggregate]) -> None:
    """
    Write aggregates to a snapshot file.

    Raises:
        SetupError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(aggregates_to_json(aggregates)), encoding="utf-8")
    except OSError as exc:
        raise SetupError(f"could not create report JSON file {path}: {exc}") from exc


def load_snapshot(path: Path) -> list[FunctionAggregate]:
    """
    Load aggregates from a snapshot file.

    Raises:
        SetupError: If the file cannot be read or decoded
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SetupError(f"could not read report JSON file {path}: {exc}") from exc
    try:
        return aggregates_from_json(payload)
    except (AttributeError, TypeError, ValueError) as exc:
        raise SetupError(f"could not decode report JSON file {path}: {exc}") from exc
