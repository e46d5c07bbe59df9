"""Pytest configuration and shared fixtures for the Lambda cost report."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from tests.lambda_costs_test_utils import make_aggregate


@pytest.fixture(autouse=True)
def mock_aws_env_file(tmp_path, monkeypatch):
    """Auto-use fixture that provides a mock .env file for tests requiring AWS credentials.

    Creates a temporary .env file with mock credentials and points AWS_ENV_FILE
    at it, so no test ever reads the developer's real ~/.env.
    """
    env_file = tmp_path / ".env"
    env_file.write_text("AWS_ACCESS_KEY_ID=test_key\nAWS_SECRET_ACCESS_KEY=test_secret\n")
    monkeypatch.setenv("AWS_ENV_FILE", str(env_file))
    yield str(env_file)


@pytest.fixture(name="mock_print")
def fixture_mock_print(monkeypatch):
    """Patch builtins.print and return the mock for assertions."""
    patched = mock.Mock()
    monkeypatch.setattr("builtins.print", patched)
    return patched


@pytest.fixture(name="aggregate_factory")
def fixture_aggregate_factory():
    """Return the aggregate builder for tests that need several aggregates."""
    return make_aggregate


@pytest.fixture(name="snapshot_dir")
def fixture_snapshot_dir(tmp_path, monkeypatch):
    """Point the snapshot directory at a temporary path."""
    directory = tmp_path / "snapshots"
    directory.mkdir()
    monkeypatch.setenv("LAMBDA_COSTS_SNAPSHOT_DIR", str(directory))
    return directory
