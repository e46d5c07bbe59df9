"""
Log collection for the Lambda cost report.

Lists the functions in a region and downloads the last day of CloudWatch log
events for each one, turning REPORT lines into measurements.
"""

from __future__ import annotations

import logging
import signal
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import LOOKBACK_HOURS, PROGRESS_LOG_INTERVAL, log_group_name
from .cost_model import FunctionAggregate
from .exceptions import (
    CollectionInterrupted,
    PageRetrievalError,
    SetupError,
)
from .report_parser import parse_report_lines

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Aggregates plus counters from one collection run."""

    aggregates: list[FunctionAggregate]
    log_event_count: int = 0
    invocation_count: int = 0
    skipped_line_count: int = 0
    failed_functions: list[str] = field(default_factory=list)


def list_functions(lambda_client) -> list[dict]:
    """Return every function configuration in the client's region."""
    functions = []
    paginator = lambda_client.get_paginator("list_functions")
    for page in paginator.paginate():
        functions.extend(page.get("Functions", []))
    return functions


def new_aggregate(function_config: dict) -> FunctionAggregate:
    """Create an empty aggregate from a list_functions entry."""
    return FunctionAggregate(
        name=function_config["FunctionName"],
        architecture=" ".join(function_config.get("Architectures", [])),
    )


def time_window(now: Optional[datetime] = None, hours: int = LOOKBACK_HOURS) -> tuple[int, int]:
    """Return (start_ms, end_ms) epoch milliseconds covering the last `hours`."""
    end = now or datetime.now(timezone.utc)
    start = end - timedelta(hours=hours)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


def iter_log_messages(
    logs_client,
    function_name: str,
    start_ms: int,
    end_ms: int,
    check_interrupted: Optional[Callable[[], None]] = None,
) -> Iterator[str]:
    """
    Yield log event messages for a function's log group.

    Args:
        check_interrupted: Called before each page request; may raise to stop paging

    Raises:
        PageRetrievalError: If a page cannot be fetched
    """
    paginator = logs_client.get_paginator("filter_log_events")
    pages = iter(
        paginator.paginate(
            logGroupName=log_group_name(function_name),
            startTime=start_ms,
            endTime=end_ms,
        )
    )
    while True:
        if check_interrupted is not None:
            check_interrupted()
        try:
            page = next(pages)
        except StopIteration:
            return
        except (ClientError, BotoCoreError) as exc:
            raise PageRetrievalError(function_name, exc) from exc
        for event in page.get("events", []):
            yield event.get("message", "")


class LogCollector:
    """Downloads REPORT lines for every function in a region."""

    def __init__(
        self,
        lambda_client,
        logs_client,
        log: Optional[logging.Logger] = None,
        lookback_hours: int = LOOKBACK_HOURS,
        progress_interval: int = PROGRESS_LOG_INTERVAL,
    ):
        self.lambda_client = lambda_client
        self.logs_client = logs_client
        self.log = log or logger
        self.lookback_hours = lookback_hours
        self.progress_interval = progress_interval
        self.interrupted = False
        self._previous_handler = None

    def install_signal_handler(self):
        """Route Ctrl-C to the interrupted flag while collecting."""
        self._previous_handler = signal.signal(signal.SIGINT, self._signal_handler)

    def restore_signal_handler(self):
        if self._previous_handler is not None:
            signal.signal(signal.SIGINT, self._previous_handler)
            self._previous_handler = None

    def _signal_handler(self, _signum, _frame):
        print()
        self.interrupted = True

    def _check_interrupted(self):
        if self.interrupted:
            raise CollectionInterrupted()

    def collect(self, now: Optional[datetime] = None) -> CollectionResult:
        """
        Collect measurements for every function.

        Raises:
            SetupError: If the functions cannot be listed
            CollectionInterrupted: If the user interrupted the download
        """
        self.log.info("Listing functions")
        try:
            functions = list_functions(self.lambda_client)
        except (ClientError, BotoCoreError) as exc:
            raise SetupError(f"could not load functions: {exc}") from exc
        self.log.info("Found %d functions", len(functions))

        result = CollectionResult(aggregates=[new_aggregate(f) for f in functions])
        start_ms, end_ms = time_window(now, self.lookback_hours)

        self.log.info("Downloading logs")
        for index, aggregate in enumerate(result.aggregates):
            self._check_interrupted()
            self.log.info("Downloading logs for %s (function %d)", aggregate.name, index)
            try:
                self.collect_function(aggregate, start_ms, end_ms, result)
            except PageRetrievalError as exc:
                self.log.error("%s", exc)
                result.failed_functions.append(aggregate.name)
        # A Ctrl-C during the last function must not produce a result
        self._check_interrupted()

        self.log.info(
            "Downloading log data complete: %d log events, %d invocations",
            result.log_event_count,
            result.invocation_count,
        )
        return result

    def _counted_messages(self, messages: Iterable[str], result: CollectionResult) -> Iterator[str]:
        for message in messages:
            self._check_interrupted()
            result.log_event_count += 1
            if result.log_event_count % self.progress_interval == 0:
                self.log.info(
                    "Working: %d log events, %d invocations",
                    result.log_event_count,
                    result.invocation_count,
                )
            yield message

    def collect_function(
        self,
        aggregate: FunctionAggregate,
        start_ms: int,
        end_ms: int,
        result: CollectionResult,
    ) -> None:
        """
        Append the function's measurements to its aggregate.

        Measurements parsed before a page failure stay on the aggregate.

        Raises:
            PageRetrievalError: If a page cannot be fetched
            CollectionInterrupted: If the user interrupted the download
        """

        def count_skipped(_exc, _line):
            result.skipped_line_count += 1

        messages = iter_log_messages(
            self.logs_client,
            aggregate.name,
            start_ms,
            end_ms,
            check_interrupted=self._check_interrupted,
        )
        for measurement in parse_report_lines(
            self._counted_messages(messages, result),
            log=self.log,
            on_malformed=count_skipped,
        ):
            aggregate.add(measurement)
            result.invocation_count += 1
