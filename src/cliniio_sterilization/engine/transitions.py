"""Transition tables for workflow phases and batch statuses.

Both validators are pure functions over static tables. They only advise: the
state holders in this package never call them before mutating, so callers
compose ``validate`` and ``commit`` explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from cliniio_sterilization.core.types import BatchStatus, Record, WorkflowPhase
from cliniio_sterilization.exceptions import InvalidPhaseError, InvalidStatusError

__all__ = [
    "BATCH_STATUS_TRANSITIONS",
    "PHASE_TRANSITIONS",
    "TransitionResult",
    "allowed_transitions",
    "parse_batch_status",
    "parse_phase",
    "validate_batch_status_transition",
    "validate_phase_transition",
]

PHASE_TRANSITIONS: Mapping[WorkflowPhase, tuple[WorkflowPhase, ...]] = MappingProxyType(
    {
        WorkflowPhase.IDLE: (WorkflowPhase.PREPARATION, WorkflowPhase.CLEANING, WorkflowPhase.STERILIZATION),
        WorkflowPhase.PREPARATION: (WorkflowPhase.CLEANING, WorkflowPhase.IDLE),
        WorkflowPhase.CLEANING: (WorkflowPhase.STERILIZATION, WorkflowPhase.IDLE),
        WorkflowPhase.STERILIZATION: (WorkflowPhase.COOLING, WorkflowPhase.IDLE),
        WorkflowPhase.COOLING: (WorkflowPhase.COMPLETION, WorkflowPhase.IDLE),
        WorkflowPhase.COMPLETION: (WorkflowPhase.IDLE,),
    }
)
"""Allowed target phases for each source phase. No phase lists itself."""

BATCH_STATUS_TRANSITIONS: Mapping[BatchStatus, tuple[BatchStatus, ...]] = MappingProxyType(
    {
        BatchStatus.CREATING: (BatchStatus.READY, BatchStatus.FAILED),
        BatchStatus.READY: (BatchStatus.IN_AUTOCLAVE, BatchStatus.FAILED),
        BatchStatus.IN_AUTOCLAVE: (BatchStatus.COMPLETED, BatchStatus.FAILED),
        BatchStatus.COMPLETED: (),
        BatchStatus.FAILED: (),
    }
)
"""Allowed target statuses for each batch status. Completed and failed are terminal."""


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition check.

    Attributes:
        is_valid: Whether the transition is allowed.
        error: Why it is not allowed. None when valid.
    """

    is_valid: bool
    error: str | None = None

    def to_dict(self) -> Record:
        result: Record = {"is_valid": self.is_valid}
        if self.error is not None:
            result["error"] = self.error
        return result


def parse_phase(value: WorkflowPhase | str) -> WorkflowPhase:
    """Coerce a phase name into a ``WorkflowPhase``.

    Raises:
        InvalidPhaseError: If ``value`` is not a known phase name.
    """
    if isinstance(value, WorkflowPhase):
        return value
    try:
        return WorkflowPhase(value)
    except ValueError as e:
        raise InvalidPhaseError(value) from e


def parse_batch_status(value: BatchStatus | str) -> BatchStatus:
    """Coerce a status name into a ``BatchStatus``.

    Raises:
        InvalidStatusError: If ``value`` is not a known batch status.
    """
    if isinstance(value, BatchStatus):
        return value
    try:
        return BatchStatus(value)
    except ValueError as e:
        raise InvalidStatusError(value) from e


def allowed_transitions(phase: WorkflowPhase | str) -> tuple[WorkflowPhase, ...]:
    """Return the phases reachable from ``phase`` in one step."""
    return PHASE_TRANSITIONS[parse_phase(phase)]


def validate_phase_transition(current: WorkflowPhase | str, target: WorkflowPhase | str) -> TransitionResult:
    """Decide whether moving from ``current`` to ``target`` is permitted.

    Staying in the same phase is not a listed transition and is reported as
    invalid. Unknown phase names are reported as invalid rather than raised.

    Args:
        current: The phase the workflow is in.
        target: The phase the caller wants to move to.

    Returns:
        A ``TransitionResult``; ``error`` is set only when invalid.

    Example:
        >>> validate_phase_transition("completion", "cooling")
        TransitionResult(is_valid=False, error='Cannot transition from completion to cooling')
    """
    try:
        source = parse_phase(current)
        destination = parse_phase(target)
    except InvalidPhaseError as e:
        return TransitionResult(is_valid=False, error=str(e))

    if destination not in PHASE_TRANSITIONS[source]:
        return TransitionResult(is_valid=False, error=f"Cannot transition from {source} to {destination}")
    return TransitionResult(is_valid=True)


def validate_batch_status_transition(current: BatchStatus | str, target: BatchStatus | str) -> TransitionResult:
    """Decide whether a batch may move from ``current`` to ``target`` status.

    Mirrors ``validate_phase_transition`` for the batch lifecycle.
    """
    try:
        source = parse_batch_status(current)
        destination = parse_batch_status(target)
    except InvalidStatusError as e:
        return TransitionResult(is_valid=False, error=str(e))

    if destination not in BATCH_STATUS_TRANSITIONS[source]:
        return TransitionResult(is_valid=False, error=f"Cannot change batch status from {source} to {destination}")
    return TransitionResult(is_valid=True)
