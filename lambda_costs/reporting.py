"""
Report rendering for the Lambda cost report.

Prints one aligned row per function, most expensive first.
"""

from __future__ import annotations

from datetime import timedelta

from .cost_model import FunctionAggregate, FunctionMetrics, compute_metrics

NO_RECOMMENDATION = "N/A"
COLUMN_PADDING = 1

HEADER_ROWS = [
    [
        "Name",
        "Arch",
        "Daily",
        "Monthly",
        "Invocations",
        "Avg",  # Duration
        "RAM",  # Max
        "RAM",  # Assigned
        "RAM",  # Optimal
        "Monthly Savings",  # arm64 + RAM
    ],
    ["", "", "", "", "", "Duration", "Max", "Assigned", "Optimal", "(arm64 + RAM)"],
]


def format_duration(value: timedelta) -> str:
    """Format a duration in milliseconds, e.g. '27.83ms'."""
    return f"{value / timedelta(milliseconds=1):.2f}ms"


def sort_by_cost(aggregates: list[FunctionAggregate]) -> list[FunctionAggregate]:
    """Return aggregates ordered by descending current cost."""
    return sorted(aggregates, key=lambda a: a.current_cost(), reverse=True)


def format_row(metrics: FunctionMetrics) -> list[str]:
    optimized = str(metrics.optimized_memory)
    if metrics.optimized_memory == 0:
        optimized = NO_RECOMMENDATION
    return [
        metrics.name,
        metrics.architecture,
        f"${metrics.daily_cost:.5f}",
        f"${metrics.monthly_cost:.5f}",
        str(metrics.invocations),
        format_duration(metrics.average_duration),
        f"{metrics.peak_memory_used} ({metrics.memory_used_percent:.2f}%)",
        str(metrics.assigned_memory),
        optimized,
        f"${metrics.monthly_savings:.2f}",
    ]


def build_report_rows(aggregates: list[FunctionAggregate]) -> list[list[str]]:
    """Build header and data rows for the report table."""
    rows = [list(row) for row in HEADER_ROWS]
    rows.extend(format_row(compute_metrics(a)) for a in sort_by_cost(aggregates))
    return rows


def align_columns(rows: list[list[str]]) -> list[str]:
    """Pad every cell to its column width and join rows into lines."""
    if not rows:
        return []
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width + COLUMN_PADDING) for cell, width in zip(row, widths)]
        lines.append("".join(cells).rstrip())
    return lines


def display_report(aggregates: list[FunctionAggregate]) -> None:
    """Print the cost report table to stdout."""
    for line in align_columns(build_report_rows(aggregates)):
        print(line)
