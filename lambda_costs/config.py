"""
Configuration and path resolution for the Lambda cost report.
"""

from __future__ import annotations

import os
from pathlib import Path

# Window of CloudWatch logs downloaded per function
LOOKBACK_HOURS: int = 24

# Log a progress line every N log events
PROGRESS_LOG_INTERVAL: int = 10_000

LOG_GROUP_PREFIX: str = "/aws/lambda/"

SNAPSHOT_DIR_ENV_VAR: str = "LAMBDA_COSTS_SNAPSHOT_DIR"


def get_snapshot_dir() -> Path:
    """Return the directory snapshots are written to (current directory by default)."""
    env_val = os.environ.get(SNAPSHOT_DIR_ENV_VAR)
    if env_val:
        return Path(env_val).expanduser()
    return Path.cwd()


def log_group_name(function_name: str) -> str:
    """Return the CloudWatch log group a Lambda function writes to."""
    return f"{LOG_GROUP_PREFIX}{function_name}"
