"""Operator-facing sterilization workflow orchestration.

The orchestrator composes the batch code generator, the packaging session
manager and the batch tracker, and holds the workflow state of the current
cycle. It is a plain state container: ``start_workflow``, ``end_workflow``
and ``reset_workflow`` never consult the transition table or the compliance
checker. Callers validate first, then commit::

    result = orchestrator.validate_transition(WorkflowPhase.CLEANING)
    if result.is_valid:
        orchestrator.start_workflow(WorkflowPhase.CLEANING)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cliniio_sterilization.core.models import PhaseState, WorkflowState
from cliniio_sterilization.core.types import PhaseStatus, WorkflowPhase
from cliniio_sterilization.engine.batches import BatchTracker
from cliniio_sterilization.engine.codes import BatchCodeGenerator, utc_now
from cliniio_sterilization.engine.compliance import calculate_workflow_duration, check_compliance
from cliniio_sterilization.engine.packaging import PackagingSessionManager
from cliniio_sterilization.engine.transitions import parse_phase, validate_phase_transition

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable, Mapping

    from cliniio_sterilization.core.models import PackageInfo, SterilizationBatch
    from cliniio_sterilization.core.types import Clock
    from cliniio_sterilization.engine.compliance import ComplianceResult
    from cliniio_sterilization.engine.transitions import TransitionResult

__all__ = ["SterilizationOrchestrator"]

logger = logging.getLogger(__name__)


class SterilizationOrchestrator:
    """Single-operator state holder for the sterilization workflow.

    Each instance is independent; create one per operator context.

    Attributes:
        codes: Batch code generator and its history.
        packaging: Packaging session manager.
        batches: Batch tracker, sharing ``codes``.
        workflow: State of the current cycle.
        phase_durations: Planned duration, in seconds, of each phase.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        phase_durations: Mapping[WorkflowPhase, int] | None = None,
    ) -> None:
        """Initialize the orchestrator at the idle baseline.

        Args:
            clock: Callable returning the current time. Defaults to UTC now.
            rng: Random source for batch code suffixes.
            phase_durations: Planned duration, in seconds, per phase.
        """
        self._clock = clock or utc_now
        self.phase_durations: dict[WorkflowPhase, int] = dict(phase_durations or {})
        self.codes = BatchCodeGenerator(clock=self._clock, rng=rng)
        self.packaging = PackagingSessionManager(clock=self._clock)
        self.batches = BatchTracker(codes=self.codes, clock=self._clock)
        self.workflow = WorkflowState(phases=self._initial_phases())

    def _initial_phases(self) -> dict[WorkflowPhase, PhaseState]:
        return {phase: PhaseState(phase=phase, duration=self.phase_durations.get(phase, 0)) for phase in WorkflowPhase}

    # Workflow lifecycle

    def start_workflow(self, phase: WorkflowPhase | str) -> WorkflowState:
        """Enter ``phase`` and mark the workflow active.

        The record of the phase being left is completed first if it is still
        active.

        Args:
            phase: The phase to enter.

        Returns:
            The updated workflow state.

        Raises:
            InvalidPhaseError: If ``phase`` is not a known phase name.
        """
        phase = parse_phase(phase)
        now = self._clock()

        previous = self.workflow.phases[self.workflow.current_phase]
        if previous.phase != phase and previous.is_active:
            previous.is_active = False
            previous.status = PhaseStatus.COMPLETED
            previous.end_time = now

        self.workflow.current_phase = phase
        self.workflow.is_active = True
        self.workflow.start_time = now
        self.workflow.end_time = None

        state = self.workflow.phases[phase]
        state.is_active = True
        state.status = PhaseStatus.ACTIVE
        state.start_time = now
        state.end_time = None

        logger.debug("Workflow started in phase %s", phase)
        return self.workflow

    def end_workflow(self) -> WorkflowState:
        """Mark the workflow inactive and stamp its end time."""
        now = self._clock()
        self.workflow.is_active = False
        self.workflow.end_time = now

        state = self.workflow.phases[self.workflow.current_phase]
        if state.is_active:
            state.is_active = False
            state.status = PhaseStatus.COMPLETED
            state.end_time = now

        logger.debug("Workflow ended in phase %s", self.workflow.current_phase)
        return self.workflow

    def reset_workflow(self) -> WorkflowState:
        """Return to the idle baseline from any phase."""
        logger.info("Workflow reset from phase %s", self.workflow.current_phase)
        self.workflow = WorkflowState(phases=self._initial_phases())
        return self.workflow

    # Phase records

    def assign_tools_to_phase(self, phase: WorkflowPhase | str, tool_ids: Iterable[str]) -> PhaseState:
        """Replace the tool list of a phase record."""
        state = self.workflow.phases[parse_phase(phase)]
        state.tools = list(tool_ids)
        return state

    def set_phase_status(self, phase: WorkflowPhase | str, status: PhaseStatus | str) -> PhaseState:
        """Set the status of a phase record; ``is_active`` follows the status."""
        status = PhaseStatus(status)
        state = self.workflow.phases[parse_phase(phase)]
        state.status = status
        state.is_active = status == PhaseStatus.ACTIVE
        return state

    # Advisory checks

    def validate_transition(self, target: WorkflowPhase | str) -> TransitionResult:
        """Check a move from the current phase to ``target`` without applying it."""
        return validate_phase_transition(self.workflow.current_phase, target)

    def check_compliance(self, workflow_data: Mapping[str, Any]) -> ComplianceResult:
        return check_compliance(workflow_data)

    def workflow_duration(self) -> int | None:
        """Milliseconds between start and end of the last cycle, or None if either is unset."""
        if self.workflow.start_time is None or self.workflow.end_time is None:
            return None
        return calculate_workflow_duration(self.workflow.start_time, self.workflow.end_time)

    # Packaging

    def package_current_session(self, package_info: PackageInfo | None = None) -> SterilizationBatch | None:
        """Turn the current packaging session into a finalized batch.

        The scanned tools seed a new batch, which is finalized with a fresh
        batch code. The session is then ended.

        Returns:
            The finalized batch, or None if no session is active.
        """
        session = self.packaging.current_session
        if session is None:
            return None

        batch = self.batches.create_batch(session.operator, package_info, session.tool_ids)
        self.batches.finalize_batch(batch.id, session.operator)
        session.batch_id = batch.id
        self.packaging.end_packaging_session()
        return batch
