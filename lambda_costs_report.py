#!/usr/bin/env python3
"""
Estimate Lambda costs from the last day of CloudWatch logs and suggest cheaper
memory sizes.

This is a thin wrapper around the lambda_costs package.
"""
from __future__ import annotations

from lambda_costs.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
