"""Sterilization workflow engine.

This module provides the batch code generator, the transition validators,
the packaging session manager, the compliance checker, the batch tracker and
the orchestrator that composes them.
"""

from __future__ import annotations

from cliniio_sterilization.engine.batches import BatchTracker
from cliniio_sterilization.engine.codes import BatchCodeGenerator, get_batch_by_code, validate_batch_code
from cliniio_sterilization.engine.compliance import ComplianceResult, calculate_workflow_duration, check_compliance
from cliniio_sterilization.engine.orchestrator import SterilizationOrchestrator
from cliniio_sterilization.engine.packaging import PackagingSessionManager
from cliniio_sterilization.engine.transitions import (
    BATCH_STATUS_TRANSITIONS,
    PHASE_TRANSITIONS,
    TransitionResult,
    allowed_transitions,
    validate_batch_status_transition,
    validate_phase_transition,
)

__all__ = [
    "BATCH_STATUS_TRANSITIONS",
    "PHASE_TRANSITIONS",
    "BatchCodeGenerator",
    "BatchTracker",
    "ComplianceResult",
    "PackagingSessionManager",
    "SterilizationOrchestrator",
    "TransitionResult",
    "allowed_transitions",
    "calculate_workflow_duration",
    "check_compliance",
    "get_batch_by_code",
    "validate_batch_code",
    "validate_batch_status_transition",
    "validate_phase_transition",
]
