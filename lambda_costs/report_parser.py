"""
Parser for Lambda REPORT log lines.

Each invocation of a Lambda function ends with a tab-separated line such as::

    REPORT RequestId: d432a1bd-...\tDuration: 27.83 ms\tBilled Duration: 28 ms\t
    Memory Size: 3096 MB\tMax Memory Used: 62 MB

Everything else in the log stream (application output, XRAY trace lines, START/END
markers) is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable, Iterator, Optional

from .exceptions import MalformedFieldError

REPORT_MARKER = "REPORT"
FIELD_SEPARATOR = "\t"
KEY_VALUE_SEPARATOR = ": "
MS_SUFFIX = " ms"
MB_SUFFIX = " MB"

# Plain decimal and integer literals; no exponents, underscores or inner whitespace
DECIMAL_PATTERN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)", re.ASCII)
INTEGER_PATTERN = re.compile(r"[-+]?\d+", re.ASCII)

logger = logging.getLogger(__name__)


@dataclass
class Measurement:
    """Resource usage of a single function invocation."""

    request_id: str = ""
    duration: timedelta = timedelta(0)
    billed_duration: timedelta = timedelta(0)
    init_duration: timedelta = timedelta(0)
    memory_size: int = 0
    max_memory_used: int = 0
    is_cold_start: bool = False


def _strip_number(field: str, value: str, suffix: str, pattern) -> str:
    if not value.endswith(suffix):
        raise MalformedFieldError(field, value)
    number = value[: -len(suffix)]
    if not pattern.fullmatch(number):
        raise MalformedFieldError(field, value)
    return number


def _parse_ms(field: str, value: str) -> timedelta:
    number = _strip_number(field, value, MS_SUFFIX, DECIMAL_PATTERN)
    try:
        return timedelta(milliseconds=float(number))
    except (OverflowError, ValueError) as exc:
        raise MalformedFieldError(field, value) from exc


def _parse_mb(field: str, value: str) -> int:
    return int(_strip_number(field, value, MB_SUFFIX, INTEGER_PATTERN))


def _apply_field(measurement: Measurement, key: str, value: str) -> None:
    if key == "RequestId":
        measurement.request_id = value
    elif key == "Duration":
        measurement.duration = _parse_ms(key, value)
    elif key == "Billed Duration":
        measurement.billed_duration = _parse_ms(key, value)
    elif key == "Memory Size":
        measurement.memory_size = _parse_mb(key, value)
    elif key == "Max Memory Used":
        measurement.max_memory_used = _parse_mb(key, value)
    elif key == "Init Duration":
        measurement.init_duration = _parse_ms(key, value)
        measurement.is_cold_start = True


def parse_report_line(line: str) -> Optional[Measurement]:
    """
    Parse a single log line into a Measurement.

    Args:
        line: Raw log event message

    Returns:
        Measurement for REPORT lines, None for any other line

    Raises:
        MalformedFieldError: If a known field holds a value that cannot be parsed
    """
    report = line.strip()
    if not report.startswith(REPORT_MARKER):
        return None

    measurement = Measurement()
    for part in report[len(REPORT_MARKER) :].split(FIELD_SEPARATOR):
        key, sep, value = part.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            continue
        _apply_field(measurement, key.strip(), value.strip())
    return measurement


def parse_report_lines(
    lines: Iterable[str],
    log: Optional[logging.Logger] = None,
    on_malformed: Optional[Callable[[MalformedFieldError, str], None]] = None,
) -> Iterator[Measurement]:
    """
    Yield Measurements from a stream of log lines, skipping malformed REPORT lines.

    Args:
        lines: Raw log event messages
        log: Logger that receives one error per skipped line (module logger by default)
        on_malformed: Optional callback invoked with the error and line of each skipped line
    """
    log = log or logger
    for line in lines:
        try:
            measurement = parse_report_line(line)
        except MalformedFieldError as exc:
            log.error("Skipping malformed report line: %s (line: %r)", exc, line)
            if on_malformed is not None:
                on_malformed(exc, line)
            continue
        if measurement is not None:
            yield measurement
