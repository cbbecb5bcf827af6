"""Persistence adapter for sterilization records.

The engine performs no I/O itself. This adapter takes its in-memory models
and stores them through the repositories, preserving the append-only audit
trail: events already stored for a batch are never rewritten.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from cliniio_sterilization.core.events import BatchAuditEvent
from cliniio_sterilization.core.models import (
    PackageInfo,
    PackagingSession,
    SterilizationBatch,
    SterilizationInfo,
    Tool,
)
from cliniio_sterilization.core.types import WorkflowPhase
from cliniio_sterilization.db.models import (
    BatchAuditEventModel,
    BatchCodeGenerationModel,
    PackagingSessionModel,
    SterilizationBatchModel,
)
from cliniio_sterilization.db.repositories import (
    BatchAuditEventRepository,
    BatchCodeGenerationRepository,
    PackagingSessionRepository,
    SterilizationBatchRepository,
)
from cliniio_sterilization.engine.codes import as_utc
from cliniio_sterilization.exceptions import BatchNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from cliniio_sterilization.core.models import BatchCodeGeneration

__all__ = ["SterilizationPersistence"]

logger = logging.getLogger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    return as_utc(datetime.fromisoformat(value)) if value else None


def _sterilization_info(data: dict[str, Any]) -> SterilizationInfo:
    return SterilizationInfo(
        cycle_id=data.get("cycle_id"),
        autoclave_id=data.get("autoclave_id"),
        start_time=_parse_datetime(data.get("start_time")),
        end_time=_parse_datetime(data.get("end_time")),
        temperature=data.get("temperature"),
        pressure=data.get("pressure"),
    )


class SterilizationPersistence:
    """Stores and loads sterilization records through an async session.

    Batch ids issued by the batch tracker are UUID strings and are used as the
    primary key of the stored batch and its audit events.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the adapter.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

        # Initialize repositories
        self._batch_repo = SterilizationBatchRepository(session=session)
        self._event_repo = BatchAuditEventRepository(session=session)
        self._session_repo = PackagingSessionRepository(session=session)
        self._code_repo = BatchCodeGenerationRepository(session=session)

    async def save_batch(self, batch: SterilizationBatch) -> SterilizationBatchModel:
        """Insert or update a batch and append its new audit events.

        Args:
            batch: The batch to store.

        Returns:
            The stored batch model.
        """
        batch_id = UUID(batch.id)
        model = await self._batch_repo.get_one_or_none(id=batch_id)

        if model is None:
            model = SterilizationBatchModel(
                id=batch_id,
                created_by=batch.created_by,
                opened_at=batch.created_at,
            )
            await self._batch_repo.add(model, auto_commit=False)

        model.batch_code = batch.batch_code
        model.status = batch.status
        model.tools = list(batch.tools)
        model.package_info = batch.package_info.to_dict()
        model.sterilization_info = batch.sterilization_info.to_dict()

        stored = await self._event_repo.existing_ids(batch_id)
        new_events = [
            BatchAuditEventModel(
                id=UUID(event.id),
                batch_id=batch_id,
                sequence=position,
                action=event.action,
                operator=event.operator,
                timestamp=event.timestamp,
                details=event.details,
                data=dict(event.data),
            )
            for position, event in enumerate(batch.audit_trail)
            if UUID(event.id) not in stored
        ]
        if new_events:
            await self._event_repo.add_many(new_events, auto_commit=False)

        await self.session.commit()
        logger.debug("Saved batch %s with %d new audit events", batch.id, len(new_events))
        return model

    async def load_batch(self, batch_id: str) -> SterilizationBatch:
        """Load a batch and its audit trail.

        Args:
            batch_id: The batch id.

        Returns:
            The rebuilt batch.

        Raises:
            BatchNotFoundError: If no batch is stored under ``batch_id``.
        """
        try:
            key = UUID(batch_id)
        except ValueError as e:
            raise BatchNotFoundError(batch_id) from e
        model = await self._batch_repo.get_one_or_none(id=key)
        if model is None:
            raise BatchNotFoundError(batch_id)
        return await self._to_batch(model)

    async def load_batch_by_code(self, code: str) -> SterilizationBatch:
        """Load the first batch carrying ``code``.

        Raises:
            BatchNotFoundError: If no batch carries the code.
        """
        model = await self._batch_repo.get_by_code(code)
        if model is None:
            raise BatchNotFoundError(code)
        return await self._to_batch(model)

    async def load_batches_for_tool(self, tool_id: str) -> list[SterilizationBatch]:
        """Load every stored batch holding ``tool_id``, newest first."""
        return [await self._to_batch(model) for model in await self._batch_repo.find_by_tool(tool_id)]

    async def _to_batch(self, model: SterilizationBatchModel) -> SterilizationBatch:
        events = await self._event_repo.list_for_batch(model.id)
        package = model.package_info or {}
        return SterilizationBatch(
            id=str(model.id),
            created_by=model.created_by,
            created_at=as_utc(model.opened_at),
            status=model.status,
            batch_code=model.batch_code,
            tools=list(model.tools or []),
            package_info=PackageInfo(
                package_type=package.get("package_type", ""),
                package_size=package.get("package_size", ""),
                notes=package.get("notes"),
            ),
            sterilization_info=_sterilization_info(model.sterilization_info or {}),
            audit_trail=[
                BatchAuditEvent(
                    id=str(event.id),
                    batch_id=str(model.id),
                    action=event.action,
                    operator=event.operator,
                    timestamp=as_utc(event.timestamp),
                    details=event.details or "",
                    data=dict(event.data or {}),
                )
                for event in events
            ],
        )

    async def save_session(self, session: PackagingSession) -> PackagingSessionModel:
        """Insert or update a packaging session keyed by its id."""
        model = await self._session_repo.get_by_session_key(session.id)

        if model is None:
            model = PackagingSessionModel(
                session_key=session.id,
                operator=session.operator,
                start_time=session.start_time,
            )
            await self._session_repo.add(model, auto_commit=False)

        model.status = session.status
        model.scanned_tools = [tool.to_dict() for tool in session.scanned_tools]
        model.is_batch_mode = session.is_batch_mode
        model.batch_id = session.batch_id

        await self.session.commit()
        return model

    async def load_session(self, session_key: str) -> PackagingSession | None:
        """Load a packaging session by its id, or None if it was never saved."""
        model = await self._session_repo.get_by_session_key(session_key)
        if model is None:
            return None
        return PackagingSession(
            id=model.session_key,
            operator=model.operator,
            start_time=as_utc(model.start_time),
            status=model.status,
            scanned_tools=[
                Tool(
                    id=tool["id"],
                    label=tool.get("label", ""),
                    phase=WorkflowPhase(tool["phase"]) if tool.get("phase") else None,
                )
                for tool in model.scanned_tools or []
            ],
            is_batch_mode=model.is_batch_mode,
            batch_id=model.batch_id,
        )

    async def save_code_generation(self, generation: BatchCodeGeneration) -> BatchCodeGenerationModel:
        """Store one batch code generation record."""
        model = BatchCodeGenerationModel(
            code=generation.code,
            generated_at=generation.generated_at,
            operator=generation.operator,
            tool_count=generation.tool_count,
            is_single_tool=generation.is_single_tool,
        )
        return await self._code_repo.add(model, auto_commit=True)
