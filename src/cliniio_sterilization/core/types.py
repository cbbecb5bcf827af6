"""Core type definitions for cliniio-sterilization.

This module defines the closed enumerations used throughout the sterilization
workflow: cycle phases, per-phase status, packaging session lifecycle, batch
lifecycle and audit actions.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import datetime
from enum import Enum, auto
from typing import Any, TypeAlias

# StrEnum backport for Python < 3.11
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:

    class StrEnum(str, Enum):
        """String enumeration compatibility for Python < 3.11."""

        def __str__(self) -> str:
            return str(self.value)

        @staticmethod
        def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
            return name.lower()


__all__ = [
    "AuditAction",
    "BatchStatus",
    "Clock",
    "PhaseStatus",
    "Record",
    "SessionStatus",
    "WorkflowPhase",
]


class WorkflowPhase(StrEnum):
    """Named stage of a physical sterilization cycle.

    Attributes:
        IDLE: No cycle in progress.
        PREPARATION: Tools are being gathered and inspected.
        CLEANING: Tools are being cleaned before sterilization.
        STERILIZATION: Tools are inside the autoclave.
        COOLING: Tools are cooling after the autoclave run.
        COMPLETION: Cycle finished, tools ready for storage.
    """

    IDLE = auto()
    PREPARATION = auto()
    CLEANING = auto()
    STERILIZATION = auto()
    COOLING = auto()
    COMPLETION = auto()


class PhaseStatus(StrEnum):
    """Status of a single phase record within a workflow.

    Attributes:
        PENDING: Phase has not been entered yet.
        ACTIVE: Phase is currently running.
        COMPLETED: Phase finished normally.
        FAILED: Phase ended with a failure.
        PAUSED: Phase timer is temporarily stopped.
    """

    PENDING = auto()
    ACTIVE = auto()
    COMPLETED = auto()
    FAILED = auto()
    PAUSED = auto()


class SessionStatus(StrEnum):
    """Lifecycle status of a packaging session."""

    ACTIVE = auto()
    COMPLETED = auto()
    CANCELLED = auto()


class BatchStatus(StrEnum):
    """Lifecycle status of a sterilization batch.

    Attributes:
        CREATING: Batch is open and tools are being added.
        READY: Batch has been finalized and coded, waiting for the autoclave.
        IN_AUTOCLAVE: Batch is inside an autoclave run.
        COMPLETED: Autoclave run finished successfully.
        FAILED: Batch or its autoclave run failed.
    """

    CREATING = auto()
    READY = auto()
    IN_AUTOCLAVE = auto()
    COMPLETED = auto()
    FAILED = auto()


class AuditAction(StrEnum):
    """Kinds of entries written to a batch audit trail."""

    CREATED = auto()
    TOOL_ADDED = auto()
    TOOL_REMOVED = auto()
    FINALIZED = auto()
    STATUS_CHANGED = auto()
    STERILIZATION_RECORDED = auto()


# Type aliases
Record: TypeAlias = dict[str, Any]
"""JSON-serializable record handed to the persistence collaborator."""

Clock: TypeAlias = Callable[[], datetime]
"""Zero-argument callable returning the current (UTC) time."""
