"""REST API controllers for the sterilization workflow.

This module provides four controller classes backed by the injected
``SterilizationOrchestrator``:
- PackagingSessionController: Start, scan into, package and end sessions
- BatchController: Create, finalize and track batches
- BatchCodeController: Generate and check batch codes
- WorkflowController: Drive the phase workflow and run advisory checks

Mutating endpoints never validate before committing; clients call the
validation endpoints first when they want the transition table enforced.
"""

from __future__ import annotations

from typing import ClassVar

from litestar import Controller, delete, get, post
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK

from cliniio_sterilization.core.models import (
    BatchCodeGeneration,
    PackageInfo,
    PackagingSession,
    SterilizationBatch,
    WorkflowState,
)
from cliniio_sterilization.core.types import PhaseStatus
from cliniio_sterilization.engine.codes import validate_batch_code
from cliniio_sterilization.engine.orchestrator import SterilizationOrchestrator  # noqa: TC001 - needed for DI
from cliniio_sterilization.engine.transitions import (
    parse_batch_status,
    parse_phase,
    validate_batch_status_transition,
    validate_phase_transition,
)
from cliniio_sterilization.exceptions import BatchNotFoundError, NoActiveSessionError
from cliniio_sterilization.web.dto import (
    AuditEventDTO,
    BatchCodeDTO,
    BatchDTO,
    BatchToolDTO,
    CodeValidationDTO,
    ComplianceRequestDTO,
    ComplianceResultDTO,
    CreateBatchDTO,
    GenerateCodeDTO,
    GraphDTO,
    OperatorDTO,
    PackageDetailsDTO,
    PackagingSessionDTO,
    PhaseDTO,
    ScanToolDTO,
    StartSessionDTO,
    StartWorkflowDTO,
    ToolDTO,
    TransitionRequestDTO,
    TransitionResultDTO,
    UpdateBatchStatusDTO,
    WorkflowDTO,
)
from cliniio_sterilization.web.graph import generate_phase_graph, parse_phase_graph_to_dict

__all__ = [
    "BatchCodeController",
    "BatchController",
    "PackagingSessionController",
    "WorkflowController",
]


def _session_dto(session: PackagingSession) -> PackagingSessionDTO:
    return PackagingSessionDTO(
        id=session.id,
        operator=session.operator,
        start_time=session.start_time,
        status=session.status.value,
        scanned_tools=[
            ToolDTO(id=tool.id, label=tool.label, phase=tool.phase.value if tool.phase else None)
            for tool in session.scanned_tools
        ],
        is_batch_mode=session.is_batch_mode,
        batch_id=session.batch_id,
    )


def _batch_dto(batch: SterilizationBatch) -> BatchDTO:
    return BatchDTO(
        id=batch.id,
        batch_code=batch.batch_code,
        created_by=batch.created_by,
        created_at=batch.created_at,
        status=batch.status.value,
        tools=list(batch.tools),
        package_info=batch.package_info.to_dict(),
        sterilization_info=batch.sterilization_info.to_dict(),
        audit_trail=[
            AuditEventDTO(
                id=event.id,
                action=event.action.value,
                operator=event.operator,
                timestamp=event.timestamp,
                details=event.details,
                data=dict(event.data),
            )
            for event in batch.audit_trail
        ],
    )


def _code_dto(generation: BatchCodeGeneration) -> BatchCodeDTO:
    return BatchCodeDTO(
        code=generation.code,
        generated_at=generation.generated_at,
        operator=generation.operator,
        tool_count=generation.tool_count,
        is_single_tool=generation.is_single_tool,
    )


def _workflow_dto(workflow: WorkflowState, duration_ms: int | None) -> WorkflowDTO:
    return WorkflowDTO(
        current_phase=workflow.current_phase.value,
        is_active=workflow.is_active,
        start_time=workflow.start_time,
        end_time=workflow.end_time,
        duration_ms=duration_ms,
        phases=[
            PhaseDTO(
                phase=state.phase.value,
                duration=state.duration,
                tools=list(state.tools),
                is_active=state.is_active,
                status=state.status.value,
                start_time=state.start_time,
                end_time=state.end_time,
            )
            for state in workflow.phases.values()
        ],
    )


def _require_session(orchestrator: SterilizationOrchestrator) -> PackagingSession:
    session = orchestrator.packaging.current_session
    if session is None:
        raise NoActiveSessionError
    return session


def _require_batch(batch: SterilizationBatch | None, batch_id: str) -> SterilizationBatch:
    if batch is None:
        raise BatchNotFoundError(batch_id)
    return batch


class PackagingSessionController(Controller):
    """API controller for the current packaging session.

    Tags: Packaging Sessions
    """

    path = "/sessions"
    tags: ClassVar[list[str]] = ["Packaging Sessions"]

    @post("/")
    async def start_session(
        self,
        data: StartSessionDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> PackagingSessionDTO:
        """Start a packaging session, replacing any session in progress.

        Args:
            data: Session start parameters.
            orchestrator: Injected orchestrator.

        Returns:
            The new session.
        """
        session = orchestrator.packaging.start_packaging_session(
            data.operator,
            is_batch_mode=data.is_batch_mode,
            batch_id=data.batch_id,
        )
        return _session_dto(session)

    @get("/current")
    async def get_current_session(self, orchestrator: SterilizationOrchestrator) -> PackagingSessionDTO:
        """Get the current packaging session.

        Raises:
            NoActiveSessionError: If no session is in progress.
        """
        return _session_dto(_require_session(orchestrator))

    @delete("/current")
    async def end_session(self, orchestrator: SterilizationOrchestrator) -> None:
        """End the current packaging session. Succeeds when there is none."""
        orchestrator.packaging.end_packaging_session()

    @post("/current/tools", status_code=HTTP_200_OK)
    async def scan_tool(
        self,
        data: ScanToolDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> PackagingSessionDTO:
        """Scan a tool into the current session.

        Raises:
            NoActiveSessionError: If no session is in progress.
        """
        orchestrator.packaging.add_tool_to_session(data.tool_id)
        return _session_dto(_require_session(orchestrator))

    @delete("/current/tools/{tool_id:str}", status_code=HTTP_200_OK)
    async def remove_tool(
        self,
        tool_id: str,
        orchestrator: SterilizationOrchestrator,
    ) -> PackagingSessionDTO:
        """Remove the most recent scan of a tool from the current session.

        Raises:
            NoActiveSessionError: If no session is in progress.
        """
        orchestrator.packaging.remove_tool_from_session(tool_id)
        return _session_dto(_require_session(orchestrator))

    @post("/current/package")
    async def package_session(
        self,
        data: PackageDetailsDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> BatchDTO:
        """Turn the current session into a finalized, coded batch and end the session.

        Raises:
            NoActiveSessionError: If no session is in progress.
        """
        batch = orchestrator.package_current_session(
            PackageInfo(package_type=data.package_type, package_size=data.package_size, notes=data.notes)
        )
        if batch is None:
            raise NoActiveSessionError
        return _batch_dto(batch)


class BatchController(Controller):
    """API controller for sterilization batches.

    Tags: Batches
    """

    path = "/batches"
    tags: ClassVar[list[str]] = ["Batches"]

    @post("/")
    async def create_batch(self, data: CreateBatchDTO, orchestrator: SterilizationOrchestrator) -> BatchDTO:
        """Create a batch in ``creating`` status."""
        batch = orchestrator.batches.create_batch(
            data.operator,
            PackageInfo(package_type=data.package_type, package_size=data.package_size, notes=data.notes),
            data.tool_ids,
        )
        return _batch_dto(batch)

    @get("/")
    async def list_batches(
        self,
        orchestrator: SterilizationOrchestrator,
        status: str | None = Parameter(
            default=None,
            description="Filter by batch status",
        ),
    ) -> list[BatchDTO]:
        """List batches, oldest first, optionally filtered by status.

        Args:
            orchestrator: Injected orchestrator.
            status: Optional status filter.

        Returns:
            List of batch DTOs.
        """
        if status:
            batches = orchestrator.batches.get_batches_by_status(parse_batch_status(status))
        else:
            batches = orchestrator.batches.batch_history
        return [_batch_dto(batch) for batch in batches]

    @get("/{batch_id:str}")
    async def get_batch(self, batch_id: str, orchestrator: SterilizationOrchestrator) -> BatchDTO:
        """Get a batch by id.

        Raises:
            BatchNotFoundError: If the batch does not exist.
        """
        return _batch_dto(_require_batch(orchestrator.batches.get_batch_by_id(batch_id), batch_id))

    @get("/by-code/{code:str}")
    async def get_batch_by_code(self, code: str, orchestrator: SterilizationOrchestrator) -> BatchDTO:
        """Get the first batch carrying a code.

        Raises:
            BatchNotFoundError: If no batch carries the code.
        """
        return _batch_dto(_require_batch(orchestrator.batches.get_batch_by_code(code), code))

    @get("/by-tool/{tool_id:str}")
    async def get_batches_for_tool(self, tool_id: str, orchestrator: SterilizationOrchestrator) -> list[BatchDTO]:
        """List every batch a tool has been packed into, oldest first."""
        return [_batch_dto(batch) for batch in orchestrator.batches.get_batches_for_tool(tool_id)]

    @get("/by-tool/{tool_id:str}/latest")
    async def get_latest_batch_for_tool(self, tool_id: str, orchestrator: SterilizationOrchestrator) -> BatchDTO:
        """Get the most recent batch a tool has been packed into.

        Raises:
            BatchNotFoundError: If the tool was never batched.
        """
        batch = orchestrator.batches.get_most_recent_batch_for_tool(tool_id)
        return _batch_dto(_require_batch(batch, tool_id))

    @post("/{batch_id:str}/tools", status_code=HTTP_200_OK)
    async def add_tool(
        self,
        batch_id: str,
        data: BatchToolDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> BatchDTO:
        """Add a tool to a batch."""
        batch = orchestrator.batches.add_tool_to_batch(batch_id, data.tool_id, data.operator)
        return _batch_dto(_require_batch(batch, batch_id))

    @delete("/{batch_id:str}/tools/{tool_id:str}", status_code=HTTP_200_OK)
    async def remove_tool(
        self,
        batch_id: str,
        tool_id: str,
        orchestrator: SterilizationOrchestrator,
        operator: str = Parameter(description="Operator removing the tool"),
    ) -> BatchDTO:
        """Remove a tool from a batch."""
        batch = orchestrator.batches.remove_tool_from_batch(batch_id, tool_id, operator)
        return _batch_dto(_require_batch(batch, batch_id))

    @post("/{batch_id:str}/finalize", status_code=HTTP_200_OK)
    async def finalize_batch(
        self,
        batch_id: str,
        data: OperatorDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> BatchDTO:
        """Issue a batch code and mark the batch ``ready``."""
        batch = orchestrator.batches.finalize_batch(batch_id, data.operator)
        return _batch_dto(_require_batch(batch, batch_id))

    @post("/{batch_id:str}/status", status_code=HTTP_200_OK)
    async def update_status(
        self,
        batch_id: str,
        data: UpdateBatchStatusDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> BatchDTO:
        """Set a batch's status without consulting the status table."""
        batch = orchestrator.batches.update_batch_status(batch_id, parse_batch_status(data.status), data.operator)
        return _batch_dto(_require_batch(batch, batch_id))

    @post("/{batch_id:str}/status/validate", status_code=HTTP_200_OK)
    async def validate_status(
        self,
        batch_id: str,
        data: TransitionRequestDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> TransitionResultDTO:
        """Check a status change for a batch without applying it."""
        batch = _require_batch(orchestrator.batches.get_batch_by_id(batch_id), batch_id)
        result = validate_batch_status_transition(data.current or batch.status, data.target)
        return TransitionResultDTO(is_valid=result.is_valid, error=result.error)


class BatchCodeController(Controller):
    """API controller for batch codes.

    Tags: Batch Codes
    """

    path = "/codes"
    tags: ClassVar[list[str]] = ["Batch Codes"]

    @post("/")
    async def generate_code(self, data: GenerateCodeDTO, orchestrator: SterilizationOrchestrator) -> BatchCodeDTO:
        """Generate a batch code and record it in the history."""
        orchestrator.codes.generate_batch_code(data.operator, data.tool_count)
        return _code_dto(orchestrator.codes.history[-1])

    @get("/history")
    async def code_history(self, orchestrator: SterilizationOrchestrator) -> list[BatchCodeDTO]:
        """List every generated code, oldest first."""
        return [_code_dto(generation) for generation in orchestrator.codes.history]

    @get("/{code:str}/valid")
    async def check_code(self, code: str) -> CodeValidationDTO:
        """Check that a string has the shape of a batch code."""
        return CodeValidationDTO(code=code, is_valid=validate_batch_code(code))


class WorkflowController(Controller):
    """API controller for the phase workflow of the current cycle.

    Tags: Workflow
    """

    path = "/workflow"
    tags: ClassVar[list[str]] = ["Workflow"]

    @get("/")
    async def get_workflow(self, orchestrator: SterilizationOrchestrator) -> WorkflowDTO:
        """Get the workflow state."""
        return _workflow_dto(orchestrator.workflow, orchestrator.workflow_duration())

    @post("/start", status_code=HTTP_200_OK)
    async def start_workflow(self, data: StartWorkflowDTO, orchestrator: SterilizationOrchestrator) -> WorkflowDTO:
        """Enter a phase. The transition table is not consulted.

        Raises:
            InvalidPhaseError: If the phase name is unknown.
        """
        workflow = orchestrator.start_workflow(parse_phase(data.phase))
        return _workflow_dto(workflow, orchestrator.workflow_duration())

    @post("/end", status_code=HTTP_200_OK)
    async def end_workflow(self, orchestrator: SterilizationOrchestrator) -> WorkflowDTO:
        """Mark the workflow inactive."""
        workflow = orchestrator.end_workflow()
        return _workflow_dto(workflow, orchestrator.workflow_duration())

    @post("/reset", status_code=HTTP_200_OK)
    async def reset_workflow(self, orchestrator: SterilizationOrchestrator) -> WorkflowDTO:
        """Return to the idle baseline from any phase."""
        workflow = orchestrator.reset_workflow()
        return _workflow_dto(workflow, orchestrator.workflow_duration())

    @post("/validate-transition", status_code=HTTP_200_OK)
    async def validate_transition(
        self,
        data: TransitionRequestDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> TransitionResultDTO:
        """Check a phase transition without applying it."""
        result = validate_phase_transition(data.current or orchestrator.workflow.current_phase, data.target)
        return TransitionResultDTO(is_valid=result.is_valid, error=result.error)

    @post("/compliance", status_code=HTTP_200_OK)
    async def check_compliance(
        self,
        data: ComplianceRequestDTO,
        orchestrator: SterilizationOrchestrator,
    ) -> ComplianceResultDTO:
        """Check that the monitored telemetry fields are present."""
        result = orchestrator.check_compliance(
            {"temperature": data.temperature, "pressure": data.pressure, "duration": data.duration}
        )
        return ComplianceResultDTO(compliant=result.compliant, issues=list(result.issues))

    @get("/graph")
    async def get_graph(
        self,
        orchestrator: SterilizationOrchestrator,
        graph_format: str = Parameter(
            default="mermaid",
            description="Graph format: 'mermaid' or 'json'",
        ),
    ) -> GraphDTO:
        """Get the phase graph with the current phase highlighted.

        Args:
            orchestrator: Injected orchestrator.
            graph_format: Graph format ('mermaid' or 'json').

        Returns:
            Graph DTO with visualization data.
        """
        workflow = orchestrator.workflow
        graph_dict = parse_phase_graph_to_dict(workflow.current_phase)

        mermaid_source = ""
        if graph_format == "mermaid":
            mermaid_source = generate_phase_graph(
                current_phase=workflow.current_phase,
                completed_phases=[p for p, s in workflow.phases.items() if s.status == PhaseStatus.COMPLETED],
                failed_phases=[p for p, s in workflow.phases.items() if s.status == PhaseStatus.FAILED],
            )
        return GraphDTO(mermaid_source=mermaid_source, nodes=graph_dict["nodes"], edges=graph_dict["edges"])
