"""Cliniio Sterilization - sterilization workflow library for Litestar.

This package tracks a sterile processing department's reprocessing cycle:
packaging sessions, batch codes, batch audit trails and the phase workflow
of the current cycle. Every check is advisory; the state containers accept
any mutation and callers decide whether to validate first.

Key Features:
    - Batch codes of the form ``YYYYMMDD-HHMM-XXX``
    - Phase transition and batch status tables
    - Packaging sessions that turn scanned tools into coded batches
    - Append-only batch audit trails
    - Optional SQLAlchemy persistence and a Litestar REST API

Example:
    >>> from cliniio_sterilization import SterilizationOrchestrator, WorkflowPhase
    >>>
    >>> orchestrator = SterilizationOrchestrator()
    >>> session = orchestrator.packaging.start_packaging_session("Dr. Smith")
    >>> orchestrator.packaging.add_tool_to_session("T-001")
    >>> batch = orchestrator.package_current_session()
    >>> orchestrator.validate_transition(WorkflowPhase.PREPARATION).is_valid
    True
"""

from __future__ import annotations

from cliniio_sterilization.__metadata__ import __project__, __version__
from cliniio_sterilization.core import (
    AuditAction,
    BatchAuditEvent,
    BatchCodeGeneration,
    BatchStatus,
    PackageInfo,
    PackagingSession,
    PhaseState,
    PhaseStatus,
    SessionStatus,
    SterilizationBatch,
    SterilizationInfo,
    Tool,
    WorkflowPhase,
    WorkflowState,
)
from cliniio_sterilization.engine import (
    BatchCodeGenerator,
    BatchTracker,
    ComplianceResult,
    PackagingSessionManager,
    SterilizationOrchestrator,
    TransitionResult,
    calculate_workflow_duration,
    check_compliance,
    get_batch_by_code,
    validate_batch_code,
    validate_batch_status_transition,
    validate_phase_transition,
)
from cliniio_sterilization.exceptions import (
    BatchNotFoundError,
    InvalidPhaseError,
    InvalidStatusError,
    NoActiveSessionError,
    SterilizationError,
)
from cliniio_sterilization.plugin import SterilizationPlugin, SterilizationPluginConfig

__all__ = (
    "AuditAction",
    "BatchAuditEvent",
    "BatchCodeGeneration",
    "BatchCodeGenerator",
    "BatchNotFoundError",
    "BatchStatus",
    "BatchTracker",
    "ComplianceResult",
    "InvalidPhaseError",
    "InvalidStatusError",
    "NoActiveSessionError",
    "PackageInfo",
    "PackagingSession",
    "PackagingSessionManager",
    "PhaseState",
    "PhaseStatus",
    "SessionStatus",
    "SterilizationBatch",
    "SterilizationError",
    "SterilizationInfo",
    "SterilizationOrchestrator",
    "SterilizationPlugin",
    "SterilizationPluginConfig",
    "Tool",
    "TransitionResult",
    "WorkflowPhase",
    "WorkflowState",
    "__project__",
    "__version__",
    "calculate_workflow_duration",
    "check_compliance",
    "get_batch_by_code",
    "validate_batch_code",
    "validate_batch_status_transition",
    "validate_phase_transition",
)
