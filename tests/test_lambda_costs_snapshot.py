"""Tests for lambda_costs/snapshot.py."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from lambda_costs.cost_model import FunctionAggregate
from lambda_costs.exceptions import SetupError
from lambda_costs.report_parser import parse_report_line
from lambda_costs.snapshot import (
    aggregates_from_json,
    aggregates_to_json,
    load_snapshot,
    measurement_from_dict,
    measurement_to_dict,
    save_snapshot,
    snapshot_file_name,
)
from tests.assertions import assert_equal
from tests.lambda_costs_test_utils import COLD_REPORT_LINE, WARM_REPORT_LINE


def test_snapshot_file_name():
    """Snapshots are keyed by account and region."""
    assert snapshot_file_name("123456789012", "eu-west-1") == "123456789012-eu-west-1.json"


class TestMeasurementSerialization:
    """Tests for the Measurement JSON shape."""

    def test_measurement_to_dict_uses_nanoseconds(self):
        measurement = parse_report_line(COLD_REPORT_LINE)

        data = measurement_to_dict(measurement)

        assert data == {
            "requestId": "e6ef2bbc-cc60-4a4e-a671-915a809e05d3",
            "duration": 1_365_000_000,
            "billedDuration": 1_618_000_000,
            "initDuration": 252_990_000,
            "memorySize": 3096,
            "maxMemoryUsed": 55,
            "isColdStart": True,
        }

    def test_measurement_from_dict(self):
        measurement = measurement_from_dict(
            {
                "requestId": "abc",
                "duration": 27_830_000,
                "billedDuration": 28_000_000,
                "initDuration": 0,
                "memorySize": 3096,
                "maxMemoryUsed": 62,
                "isColdStart": False,
            }
        )

        assert measurement == parse_report_line(WARM_REPORT_LINE.replace(
            "d432a1bd-8320-4fad-95d5-290fc6ea9f02", "abc"
        ))

    def test_measurement_from_dict_defaults(self):
        """Missing keys load as zero values."""
        measurement = measurement_from_dict({})

        assert measurement.duration == timedelta(0)
        assert_equal(measurement.memory_size, 0)
        assert measurement.is_cold_start is False


class TestAggregateSerialization:
    """Tests for aggregate documents."""

    def test_aggregates_to_json_shape(self):
        aggregate = FunctionAggregate(
            name="api", architecture="arm64", measurements=[parse_report_line(WARM_REPORT_LINE)]
        )

        payload = aggregates_to_json([aggregate])

        assert payload[0]["name"] == "api"
        assert payload[0]["architecture"] == "arm64"
        assert_equal(payload[0]["reports"][0]["billedDuration"], 28_000_000)

    def test_null_reports_load_as_empty(self):
        """Functions without any invocation may be saved with null reports."""
        aggregates = aggregates_from_json([{"name": "idle", "architecture": "x86_64", "reports": None}])

        assert aggregates == [FunctionAggregate(name="idle", architecture="x86_64")]

    def test_rejects_non_list(self):
        with pytest.raises(SetupError):
            aggregates_from_json({"name": "api"})

    def test_rejects_item_without_name(self):
        with pytest.raises(SetupError):
            aggregates_from_json([{"architecture": "arm64"}])


class TestSnapshotFiles:
    """Tests for reading and writing snapshot files."""

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / snapshot_file_name("1", "us-east-1")
        aggregates = [
            FunctionAggregate(
                name="api",
                architecture="x86_64",
                measurements=[parse_report_line(WARM_REPORT_LINE), parse_report_line(COLD_REPORT_LINE)],
            ),
            FunctionAggregate(name="idle", architecture="arm64"),
        ]

        save_snapshot(path, aggregates)

        assert path.exists()
        assert isinstance(json.loads(path.read_text()), list)
        assert load_snapshot(path) == aggregates

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(SetupError, match="could not read"):
            load_snapshot(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SetupError, match="could not read"):
            load_snapshot(path)

    def test_load_bad_report_values(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"name": "api", "reports": [{"memorySize": "lots"}]}]))

        with pytest.raises(SetupError, match="could not decode"):
            load_snapshot(path)

    def test_save_failure(self, tmp_path):
        """A path under a regular file cannot be created."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(SetupError, match="could not create"):
            save_snapshot(blocker / "out.json", [])
