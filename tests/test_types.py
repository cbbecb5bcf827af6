"""Tests for enumerations and data models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cliniio_sterilization.core.events import BatchAuditEvent
from cliniio_sterilization.core.models import (
    BatchCodeGeneration,
    PackageInfo,
    PackagingSession,
    PhaseState,
    SterilizationBatch,
    SterilizationInfo,
    Tool,
    WorkflowState,
)
from cliniio_sterilization.core.types import (
    AuditAction,
    BatchStatus,
    PhaseStatus,
    SessionStatus,
    WorkflowPhase,
)

NOW = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


@pytest.mark.unit
class TestWorkflowPhase:
    """Tests for WorkflowPhase enum."""

    def test_values(self) -> None:
        """Test WorkflowPhase enum has the lowercase phase names."""
        assert [phase.value for phase in WorkflowPhase] == [
            "idle",
            "preparation",
            "cleaning",
            "sterilization",
            "cooling",
            "completion",
        ]

    def test_string_conversion(self) -> None:
        assert str(WorkflowPhase.COOLING) == "cooling"
        assert WorkflowPhase("sterilization") is WorkflowPhase.STERILIZATION

    def test_unknown_value_rejected(self) -> None:
        with pytest.raises(ValueError):
            WorkflowPhase("drying")


@pytest.mark.unit
class TestStatusEnums:
    """Tests for the status enums."""

    def test_phase_status_values(self) -> None:
        assert set(PhaseStatus) == {"pending", "active", "completed", "failed", "paused"}

    def test_session_status_values(self) -> None:
        assert set(SessionStatus) == {"active", "completed", "cancelled"}

    def test_batch_status_values(self) -> None:
        assert BatchStatus.IN_AUTOCLAVE == "in_autoclave"
        assert len(BatchStatus) == 5

    def test_audit_action_values(self) -> None:
        assert AuditAction.STERILIZATION_RECORDED == "sterilization_recorded"
        assert AuditAction.TOOL_ADDED == "tool_added"


@pytest.mark.unit
class TestModels:
    """Tests for the dataclass models and their serialization."""

    def test_tool_defaults(self) -> None:
        tool = Tool(id="T-001")

        assert tool.label == ""
        assert tool.phase is None
        assert tool.to_dict() == {"id": "T-001", "label": "", "phase": None}

    def test_session_tool_ids_in_scan_order(self) -> None:
        session = PackagingSession(
            id="session_1",
            operator="Dr. Smith",
            start_time=NOW,
            scanned_tools=[Tool(id="T-002"), Tool(id="T-001", phase=WorkflowPhase.CLEANING)],
        )

        assert session.tool_ids == ["T-002", "T-001"]
        data = session.to_dict()
        assert data["start_time"] == "2024-03-15T09:30:00+00:00"
        assert data["status"] == "active"
        assert data["scanned_tools"][1]["phase"] == "cleaning"

    def test_batch_record_appends(self) -> None:
        batch = SterilizationBatch(id="b1", created_by="Dr. Smith", created_at=NOW)
        first = BatchAuditEvent(batch_id="b1", action=AuditAction.CREATED, operator="Dr. Smith", timestamp=NOW)
        second = BatchAuditEvent(batch_id="b1", action=AuditAction.FINALIZED, operator="Dr. Smith", timestamp=NOW)

        batch.record(first)
        returned = batch.record(second)

        assert returned is second
        assert batch.audit_trail == [first, second]

    def test_batch_to_dict(self) -> None:
        batch = SterilizationBatch(
            id="b1",
            created_by="Dr. Smith",
            created_at=NOW,
            tools=["T-001"],
            package_info=PackageInfo(package_type="pouch", package_size="small"),
            sterilization_info=SterilizationInfo(cycle_id="C-9", start_time=NOW, temperature=121.0),
        )

        data = batch.to_dict()

        assert data["status"] == "creating"
        assert data["batch_code"] is None
        assert data["package_info"] == {"package_type": "pouch", "package_size": "small", "notes": None}
        assert data["sterilization_info"]["start_time"] == NOW.isoformat()
        assert data["sterilization_info"]["end_time"] is None
        assert data["audit_trail"] == []

    @pytest.mark.parametrize(("tool_count", "expected"), [(0, False), (1, True), (2, False)])
    def test_code_generation_single_tool(self, tool_count: int, expected: bool) -> None:
        generation = BatchCodeGeneration(
            code="20240315-0930-A1B",
            generated_at=NOW,
            operator="Dr. Smith",
            tool_count=tool_count,
        )

        assert generation.is_single_tool is expected
        assert generation.to_dict()["is_single_tool"] is expected

    def test_phase_state_defaults(self) -> None:
        state = PhaseState(phase=WorkflowPhase.COOLING)

        assert state.status == PhaseStatus.PENDING
        assert state.to_dict() == {
            "phase": "cooling",
            "duration": 0,
            "tools": [],
            "is_active": False,
            "start_time": None,
            "end_time": None,
            "status": "pending",
        }

    def test_workflow_state_baseline(self) -> None:
        state = WorkflowState()

        assert state.current_phase == WorkflowPhase.IDLE
        assert state.is_active is False
        assert state.to_dict()["start_time"] is None


@pytest.mark.unit
class TestBatchAuditEvent:
    """Tests for BatchAuditEvent."""

    def test_events_get_distinct_ids(self) -> None:
        first = BatchAuditEvent(batch_id="b1", action=AuditAction.CREATED, operator="a", timestamp=NOW)
        second = BatchAuditEvent(batch_id="b1", action=AuditAction.CREATED, operator="a", timestamp=NOW)

        assert first.id != second.id

    def test_event_is_frozen(self) -> None:
        event = BatchAuditEvent(batch_id="b1", action=AuditAction.CREATED, operator="a", timestamp=NOW)

        with pytest.raises(AttributeError):
            event.operator = "b"  # type: ignore[misc]

    def test_data_is_read_only(self) -> None:
        payload = {"tool_id": "T-001"}
        event = BatchAuditEvent(
            batch_id="b1",
            action=AuditAction.TOOL_ADDED,
            operator="a",
            timestamp=NOW,
            data=payload,
        )

        with pytest.raises(TypeError):
            event.data["tool_id"] = "T-999"  # type: ignore[index]
        payload["tool_id"] = "T-999"

        assert event.data == {"tool_id": "T-001"}

    def test_to_dict(self) -> None:
        event = BatchAuditEvent(
            batch_id="b1",
            action=AuditAction.TOOL_ADDED,
            operator="Dr. Smith",
            timestamp=NOW,
            details="Tool T-001 added",
            data={"tool_id": "T-001"},
        )

        data = event.to_dict()

        assert data["action"] == "tool_added"
        assert data["timestamp"] == NOW.isoformat()
        assert data["data"] == {"tool_id": "T-001"}
