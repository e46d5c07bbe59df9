"""
Argument parsing for the Lambda cost report CLI.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Estimate the cost of every Lambda function in a region from the last "
            "24 hours of CloudWatch logs and recommend cheaper memory sizes."
        )
    )
    parser.add_argument(
        "--region",
        default="",
        help="The AWS region to query (falls back to $AWS_REGION or the current AWS profile).",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    return build_parser().parse_args(argv)
