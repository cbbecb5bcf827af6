"""Concrete data models for cliniio-sterilization.

This module provides the dataclasses that hold sterilization runtime state.
They are plain in-memory containers; each exposes ``to_dict`` so it can be
handed to the persistence collaborator as a JSON-serializable record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from cliniio_sterilization.core.types import BatchStatus, PhaseStatus, SessionStatus, WorkflowPhase

if TYPE_CHECKING:
    from cliniio_sterilization.core.events import BatchAuditEvent
    from cliniio_sterilization.core.types import Record


__all__ = [
    "BatchCodeGeneration",
    "PackageInfo",
    "PackagingSession",
    "PhaseState",
    "SterilizationBatch",
    "SterilizationInfo",
    "Tool",
    "WorkflowState",
]


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Tool:
    """Physical instrument cycled through sterilization.

    Tools scanned into a packaging session are minimal stubs carrying only the
    id; hydrating label and phase is left to the calling layer.

    Attributes:
        id: Tool identifier (usually the scanned barcode).
        label: Display label.
        phase: Current workflow phase of the tool, if known.
    """

    id: str
    label: str = ""
    phase: WorkflowPhase | None = None

    def to_dict(self) -> Record:
        return {
            "id": self.id,
            "label": self.label,
            "phase": self.phase.value if self.phase is not None else None,
        }


@dataclass
class PackagingSession:
    """An operator's active tool-scanning activity prior to batch finalization.

    Attributes:
        id: Synthetic identifier derived from the session start time.
        operator: Name of the operator running the session.
        start_time: When the session was started.
        status: Lifecycle status of the session.
        scanned_tools: Tools scanned so far, in scan order.
        is_batch_mode: Whether tools are being scanned into a batch.
        batch_id: Identifier of the associated batch, if any.
    """

    id: str
    operator: str
    start_time: datetime
    status: SessionStatus = SessionStatus.ACTIVE
    scanned_tools: list[Tool] = field(default_factory=list)
    is_batch_mode: bool = False
    batch_id: str | None = None

    @property
    def tool_ids(self) -> list[str]:
        """Ids of the scanned tools, in scan order."""
        return [tool.id for tool in self.scanned_tools]

    def to_dict(self) -> Record:
        return {
            "id": self.id,
            "operator": self.operator,
            "start_time": self.start_time.isoformat(),
            "status": self.status.value,
            "scanned_tools": [tool.to_dict() for tool in self.scanned_tools],
            "is_batch_mode": self.is_batch_mode,
            "batch_id": self.batch_id,
        }


@dataclass
class PackageInfo:
    """Packaging details of a batch."""

    package_type: str = ""
    package_size: str = ""
    notes: str | None = None

    def to_dict(self) -> Record:
        return {"package_type": self.package_type, "package_size": self.package_size, "notes": self.notes}


@dataclass
class SterilizationInfo:
    """Autoclave telemetry recorded against a batch.

    Attributes:
        cycle_id: Identifier of the sterilization cycle.
        autoclave_id: Identifier of the autoclave used.
        start_time: When the autoclave run started.
        end_time: When the autoclave run ended.
        temperature: Recorded temperature.
        pressure: Recorded pressure.
    """

    cycle_id: str | None = None
    autoclave_id: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    temperature: float | None = None
    pressure: float | None = None

    def to_dict(self) -> Record:
        return {
            "cycle_id": self.cycle_id,
            "autoclave_id": self.autoclave_id,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "temperature": self.temperature,
            "pressure": self.pressure,
        }


@dataclass
class SterilizationBatch:
    """Group of tools packaged together for one sterilization run.

    The audit trail is append-only: entries are added through ``record`` and
    are never removed or replaced.

    Attributes:
        id: Batch identifier.
        created_by: Operator who created the batch.
        created_at: When the batch was created.
        status: Lifecycle status.
        batch_code: Generated batch code, set when the batch is finalized.
        tools: Ids of the tools in the batch.
        package_info: Packaging details.
        sterilization_info: Autoclave telemetry.
        audit_trail: Chronological audit events.
    """

    id: str
    created_by: str
    created_at: datetime
    status: BatchStatus = BatchStatus.CREATING
    batch_code: str | None = None
    tools: list[str] = field(default_factory=list)
    package_info: PackageInfo = field(default_factory=PackageInfo)
    sterilization_info: SterilizationInfo = field(default_factory=SterilizationInfo)
    audit_trail: list[BatchAuditEvent] = field(default_factory=list)

    def record(self, event: BatchAuditEvent) -> BatchAuditEvent:
        """Append an event to the audit trail and return it."""
        self.audit_trail.append(event)
        return event

    def to_dict(self) -> Record:
        return {
            "id": self.id,
            "batch_code": self.batch_code,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "tools": list(self.tools),
            "package_info": self.package_info.to_dict(),
            "sterilization_info": self.sterilization_info.to_dict(),
            "audit_trail": [event.to_dict() for event in self.audit_trail],
        }


@dataclass(frozen=True)
class BatchCodeGeneration:
    """Immutable record of one batch code generation.

    Attributes:
        code: The generated code (``YYYYMMDD-HHMM-XXX``).
        generated_at: When the code was generated.
        operator: Operator who requested the code.
        tool_count: Number of tools the code was generated for.
    """

    code: str
    generated_at: datetime
    operator: str
    tool_count: int

    @property
    def is_single_tool(self) -> bool:
        """True when the code was generated for exactly one tool."""
        return self.tool_count == 1

    def to_dict(self) -> Record:
        return {
            "code": self.code,
            "generated_at": self.generated_at.isoformat(),
            "operator": self.operator,
            "tool_count": self.tool_count,
            "is_single_tool": self.is_single_tool,
        }


@dataclass
class PhaseState:
    """One phase record within a sterilization workflow.

    Attributes:
        phase: The phase this record describes.
        duration: Planned duration of the phase in seconds.
        tools: Ids of the tools currently in this phase.
        is_active: Whether the phase is currently running.
        start_time: When the phase was last entered.
        end_time: When the phase was last left.
        status: Status of the phase.
    """

    phase: WorkflowPhase
    duration: int = 0
    tools: list[str] = field(default_factory=list)
    is_active: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: PhaseStatus = PhaseStatus.PENDING

    def to_dict(self) -> Record:
        return {
            "phase": self.phase.value,
            "duration": self.duration,
            "tools": list(self.tools),
            "is_active": self.is_active,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "status": self.status.value,
        }


@dataclass
class WorkflowState:
    """Progress of one physical cycle through the workflow phases.

    Attributes:
        current_phase: Phase the workflow is currently in.
        is_active: Whether a cycle is running.
        start_time: When the running cycle was started.
        end_time: When the last cycle was ended.
        phases: One record per phase.
    """

    current_phase: WorkflowPhase = WorkflowPhase.IDLE
    is_active: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    phases: dict[WorkflowPhase, PhaseState] = field(default_factory=dict)

    def to_dict(self) -> Record:
        return {
            "current_phase": self.current_phase.value,
            "is_active": self.is_active,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "phases": [state.to_dict() for state in self.phases.values()],
        }
