"""Data Transfer Objects for the sterilization web API.

This module defines DTOs for serializing and deserializing sterilization data
in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any

import msgspec

__all__ = [
    "AuditEventDTO",
    "BatchCodeDTO",
    "BatchDTO",
    "BatchToolDTO",
    "CodeValidationDTO",
    "ComplianceRequestDTO",
    "ComplianceResultDTO",
    "CreateBatchDTO",
    "GenerateCodeDTO",
    "GraphDTO",
    "OperatorDTO",
    "PackageDetailsDTO",
    "PackagingSessionDTO",
    "PhaseDTO",
    "ScanToolDTO",
    "StartSessionDTO",
    "StartWorkflowDTO",
    "ToolDTO",
    "TransitionRequestDTO",
    "TransitionResultDTO",
    "UpdateBatchStatusDTO",
    "WorkflowDTO",
]


@dataclass
class StartSessionDTO:
    """DTO for starting a packaging session.

    Attributes:
        operator: Operator running the session.
        is_batch_mode: Whether tools are scanned into a batch.
        batch_id: Associated batch, if any.
    """

    operator: str
    is_batch_mode: bool = False
    batch_id: str | None = None


@dataclass
class ScanToolDTO:
    """DTO for scanning a tool into the current packaging session."""

    tool_id: str


@dataclass
class BatchToolDTO:
    """DTO for adding a tool to a batch."""

    tool_id: str
    operator: str


@dataclass
class PackageDetailsDTO:
    """DTO for the packaging details of a session being turned into a batch."""

    package_type: str = ""
    package_size: str = ""
    notes: str | None = None


@dataclass
class ToolDTO:
    """DTO for a scanned tool."""

    id: str
    label: str = ""
    phase: str | None = None


@dataclass
class PackagingSessionDTO:
    """DTO for a packaging session.

    Attributes:
        id: Session ID.
        operator: Operator running the session.
        start_time: When the session started.
        status: Session status.
        scanned_tools: Tools scanned so far.
        is_batch_mode: Whether tools are scanned into a batch.
        batch_id: Associated batch, if any.
    """

    id: str
    operator: str
    start_time: datetime
    status: str
    scanned_tools: list[ToolDTO]
    is_batch_mode: bool
    batch_id: str | None = None


@dataclass
class CreateBatchDTO:
    """DTO for creating a batch.

    Attributes:
        operator: Operator creating the batch.
        package_type: Package type (pouch, wrap, container, ...).
        package_size: Package size.
        notes: Free-text notes.
        tool_ids: Tools to seed the batch with.
    """

    operator: str
    package_type: str = ""
    package_size: str = ""
    notes: str | None = None
    tool_ids: list[str] = field(default_factory=list)


@dataclass
class OperatorDTO:
    """DTO carrying only the acting operator."""

    operator: str


@dataclass
class UpdateBatchStatusDTO:
    """DTO for changing a batch's status."""

    status: str
    operator: str


@dataclass
class AuditEventDTO:
    """DTO for one audit trail entry."""

    id: str
    action: str
    operator: str
    timestamp: datetime
    details: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchDTO:
    """DTO for a sterilization batch.

    Attributes:
        id: Batch ID.
        batch_code: Generated code, if finalized.
        created_by: Operator who created the batch.
        created_at: When the batch was created.
        status: Batch status.
        tools: Tool IDs in the batch.
        package_info: Packaging details.
        sterilization_info: Autoclave telemetry.
        audit_trail: Chronological audit entries.
    """

    id: str
    batch_code: str | None
    created_by: str
    created_at: datetime
    status: str
    tools: list[str]
    package_info: dict[str, Any]
    sterilization_info: dict[str, Any]
    audit_trail: list[AuditEventDTO]


@dataclass
class GenerateCodeDTO:
    """DTO for requesting a batch code."""

    operator: str
    tool_count: Annotated[int, msgspec.Meta(ge=0)] = 0


@dataclass
class BatchCodeDTO:
    """DTO for a batch code generation record."""

    code: str
    generated_at: datetime
    operator: str
    tool_count: int
    is_single_tool: bool


@dataclass
class CodeValidationDTO:
    """DTO for the result of a batch code shape check."""

    code: str
    is_valid: bool


@dataclass
class PhaseDTO:
    """DTO for one workflow phase record."""

    phase: str
    duration: int
    tools: list[str]
    is_active: bool
    status: str
    start_time: datetime | None = None
    end_time: datetime | None = None


@dataclass
class WorkflowDTO:
    """DTO for the workflow state of the current cycle."""

    current_phase: str
    is_active: bool
    phases: list[PhaseDTO]
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_ms: int | None = None


@dataclass
class StartWorkflowDTO:
    """DTO for entering a workflow phase."""

    phase: str


@dataclass
class TransitionRequestDTO:
    """DTO for checking a phase transition.

    Attributes:
        target: Phase to move to.
        current: Phase to move from. Defaults to the workflow's current phase.
    """

    target: str
    current: str | None = None


@dataclass
class TransitionResultDTO:
    """DTO for the result of a transition check."""

    is_valid: bool
    error: str | None = None


@dataclass
class ComplianceRequestDTO:
    """DTO carrying the monitored telemetry of a cycle."""

    temperature: float | None = None
    pressure: float | None = None
    duration: float | None = None


@dataclass
class ComplianceResultDTO:
    """DTO for the result of a compliance check."""

    compliant: bool
    issues: list[str]


@dataclass
class GraphDTO:
    """DTO for phase graph visualization.

    Attributes:
        mermaid_source: MermaidJS graph definition.
        nodes: List of node definitions.
        edges: List of edge definitions.
    """

    mermaid_source: str
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
