"""Tests for compliance checks and duration calculation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cliniio_sterilization.engine.compliance import (
    ComplianceResult,
    calculate_workflow_duration,
    check_compliance,
)

START = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


@pytest.mark.unit
class TestCheckCompliance:
    """Tests for check_compliance."""

    def test_all_present(self) -> None:
        result = check_compliance({"temperature": 121, "pressure": 15, "duration": 30})

        assert result == ComplianceResult(compliant=True, issues=[])

    def test_all_missing(self) -> None:
        result = check_compliance({})

        assert result.compliant is False
        assert result.issues == [
            "Temperature monitoring required",
            "Pressure monitoring required",
            "Duration tracking required",
        ]

    def test_only_pressure_missing(self) -> None:
        result = check_compliance({"temperature": 134, "duration": 18})

        assert result.compliant is False
        assert result.issues == ["Pressure monitoring required"]

    def test_none_counts_as_missing(self) -> None:
        result = check_compliance({"temperature": None, "pressure": 15, "duration": 30})

        assert result.issues == ["Temperature monitoring required"]

    def test_zero_counts_as_present(self) -> None:
        assert check_compliance({"temperature": 0, "pressure": 0.0, "duration": 0}).compliant is True

    def test_range_is_not_checked(self) -> None:
        assert check_compliance({"temperature": -40, "pressure": 999, "duration": 1}).compliant is True

    def test_extra_fields_ignored(self) -> None:
        data = {"temperature": 121, "pressure": 15, "duration": 30, "operator": "Dr. Smith"}

        assert check_compliance(data).compliant is True

    def test_to_dict(self) -> None:
        assert check_compliance({"temperature": 121, "pressure": 15}).to_dict() == {
            "compliant": False,
            "issues": ["Duration tracking required"],
        }


@pytest.mark.unit
class TestCalculateWorkflowDuration:
    """Tests for calculate_workflow_duration."""

    def test_minutes(self) -> None:
        assert calculate_workflow_duration(START, START + timedelta(minutes=45)) == 2_700_000

    def test_sub_second(self) -> None:
        assert calculate_workflow_duration(START, START + timedelta(milliseconds=1500)) == 1500

    def test_zero(self) -> None:
        assert calculate_workflow_duration(START, START) == 0

    def test_multi_day(self) -> None:
        assert calculate_workflow_duration(START, START + timedelta(days=2, seconds=1)) == 172_801_000

    def test_negative_is_not_clamped(self) -> None:
        assert calculate_workflow_duration(START, START - timedelta(seconds=5)) == -5000
