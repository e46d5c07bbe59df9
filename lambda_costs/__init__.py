"""
Lambda cost report package.

Estimate the daily and monthly cost of every Lambda function in a region from
its REPORT log lines and recommend a cheaper memory size and architecture.
"""

from .cost_model import FunctionAggregate, FunctionMetrics, compute_metrics, monthly_cost, monthly_savings
from .exceptions import CollectionInterrupted, MalformedFieldError, PageRetrievalError, SetupError
from .report_parser import Measurement, parse_report_line, parse_report_lines

__all__ = [
    "CollectionInterrupted",
    "FunctionAggregate",
    "FunctionMetrics",
    "MalformedFieldError",
    "Measurement",
    "PageRetrievalError",
    "SetupError",
    "compute_metrics",
    "monthly_cost",
    "monthly_savings",
    "parse_report_line",
    "parse_report_lines",
]
