"""Core domain module for cliniio-sterilization.

This module exports the fundamental building blocks of the sterilization
workflow: enumerations, data models and audit events.
"""

from __future__ import annotations

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
    Clock,
    PhaseStatus,
    Record,
    SessionStatus,
    WorkflowPhase,
)

__all__ = [
    "AuditAction",
    "BatchAuditEvent",
    "BatchCodeGeneration",
    "BatchStatus",
    "Clock",
    "PackageInfo",
    "PackagingSession",
    "PhaseState",
    "PhaseStatus",
    "Record",
    "SessionStatus",
    "SterilizationBatch",
    "SterilizationInfo",
    "Tool",
    "WorkflowPhase",
    "WorkflowState",
]
