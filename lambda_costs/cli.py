"""
Command-line interface and main entry point for the Lambda cost report.

Runs two stages: collect-or-load the function aggregates (cached in a JSON
snapshot per account and region), then render the cost table.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .args_parser import parse_args
from .aws_session import create_session, get_account_id
from .collector import LogCollector
from .config import get_snapshot_dir
from .cost_model import FunctionAggregate
from .exceptions import CollectionInterrupted, SetupError
from .reporting import display_report
from .snapshot import load_snapshot, save_snapshot, snapshot_file_name

INTERRUPTED_EXIT_CODE = 130


class ContextLogger(logging.LoggerAdapter):
    """Prefix every message with key=value context such as region and account."""

    def process(self, msg, kwargs):
        context = " ".join(f"{key}={value}" for key, value in self.extra.items())
        return f"[{context}] {msg}", kwargs


def collect_or_load(snapshot_path: Path, collector: LogCollector, log) -> list[FunctionAggregate]:
    """
    Load aggregates from the snapshot, or collect them from AWS and write the snapshot.

    Raises:
        SetupError: If the snapshot cannot be read or written
        CollectionInterrupted: If the user interrupted the download
    """
    if snapshot_path.exists():
        log.info("existing report data found, using it: %s", snapshot_path)
        return load_snapshot(snapshot_path)

    log.info("no existing report data found, downloading logs from AWS")
    collector.install_signal_handler()
    try:
        result = collector.collect()
    finally:
        collector.restore_signal_handler()

    if result.failed_functions:
        log.warning(
            "logs incomplete for %d function(s): %s",
            len(result.failed_functions),
            ", ".join(result.failed_functions),
        )
    if result.skipped_line_count:
        log.warning("skipped %d malformed report line(s)", result.skipped_line_count)

    log.info("creating report JSON file %s", snapshot_path)
    save_snapshot(snapshot_path, result.aggregates)
    log.info("downloading logs complete")
    return result.aggregates


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Lambda cost report CLI."""
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    log = logging.getLogger("lambda_costs")

    try:
        session = create_session(args.region)
        region = session.region_name
        log = ContextLogger(log, {"region": region})
        log.info("Looking up account ID")
        account_id = get_account_id(session)
        log = ContextLogger(log.logger, {"region": region, "account": account_id})

        snapshot_path = get_snapshot_dir() / snapshot_file_name(account_id, region)
        collector = LogCollector(session.client("lambda"), session.client("logs"), log=log)
        aggregates = collect_or_load(snapshot_path, collector, log)
    except SetupError as exc:
        log.error("%s", exc)
        return 1
    except CollectionInterrupted:
        log.warning("Interrupted by user, exiting without writing report data")
        return INTERRUPTED_EXIT_CODE

    display_report(aggregates)
    return 0
