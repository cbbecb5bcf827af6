"""Repository implementations for sterilization persistence.

This module provides async repositories for CRUD operations on the
sterilization models using advanced-alchemy's repository pattern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.filters import LimitOffset, OrderBy
from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from sqlalchemy import String, and_, cast, select

from cliniio_sterilization.db.models import (
    BatchAuditEventModel,
    BatchCodeGenerationModel,
    PackagingSessionModel,
    SterilizationBatchModel,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from cliniio_sterilization.core.types import BatchStatus, SessionStatus

__all__ = [
    "BatchAuditEventRepository",
    "BatchCodeGenerationRepository",
    "PackagingSessionRepository",
    "SterilizationBatchRepository",
]


class SterilizationBatchRepository(SQLAlchemyAsyncRepository[SterilizationBatchModel]):
    """Repository for sterilization batch CRUD operations."""

    model_type = SterilizationBatchModel

    async def get_by_code(self, code: str) -> SterilizationBatchModel | None:
        """Get the oldest batch carrying ``code``.

        Codes are not guaranteed unique, so the first batch created with the
        code wins, as in the in-memory lookup.

        Args:
            code: The batch code.

        Returns:
            The batch or None if no batch carries the code.
        """
        stmt = (
            select(SterilizationBatchModel)
            .where(SterilizationBatchModel.batch_code == code)
            .order_by(SterilizationBatchModel.opened_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_status(
        self,
        status: BatchStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[Sequence[SterilizationBatchModel], int]:
        """Find batches in a given status.

        Args:
            status: The status to filter by.
            limit: Maximum number of results.
            offset: Number of results to skip.

        Returns:
            Tuple of (batches, total_count).
        """
        return await self.list_and_count(
            SterilizationBatchModel.status == status,
            LimitOffset(limit=limit, offset=offset),
            OrderBy(field_name="opened_at", sort_order="asc"),
        )

    async def find_by_operator(self, operator: str) -> Sequence[SterilizationBatchModel]:
        """Find batches created by an operator, newest first."""
        stmt = (
            select(SterilizationBatchModel)
            .where(SterilizationBatchModel.created_by == operator)
            .order_by(SterilizationBatchModel.opened_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


    async def find_by_tool(self, tool_id: str) -> list[SterilizationBatchModel]:
        """Find batches holding a tool, newest first.

        The JSON tool list is pre-filtered as text, then matched exactly.

        Args:
            tool_id: The tool identifier.

        Returns:
            Batches whose tool list contains ``tool_id``.
        """
        stmt = (
            select(SterilizationBatchModel)
            .where(cast(SterilizationBatchModel.tools, String).contains(tool_id))
            .order_by(SterilizationBatchModel.opened_at.desc())
        )
        result = await self.session.execute(stmt)
        return [batch for batch in result.scalars().all() if tool_id in (batch.tools or [])]


class BatchAuditEventRepository(SQLAlchemyAsyncRepository[BatchAuditEventModel]):
    """Repository for batch audit events.

    Audit events are only ever added; this repository offers no update helpers.
    """

    model_type = BatchAuditEventModel

    async def list_for_batch(self, batch_id: UUID) -> Sequence[BatchAuditEventModel]:
        """List a batch's audit events in chronological order.

        Args:
            batch_id: The batch ID.

        Returns:
            Audit events in trail order.
        """
        stmt = (
            select(BatchAuditEventModel)
            .where(BatchAuditEventModel.batch_id == batch_id)
            .order_by(BatchAuditEventModel.sequence)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def existing_ids(self, batch_id: UUID) -> set[UUID]:
        """Return the ids of the audit events already stored for a batch."""
        stmt = select(BatchAuditEventModel.id).where(BatchAuditEventModel.batch_id == batch_id)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())


class PackagingSessionRepository(SQLAlchemyAsyncRepository[PackagingSessionModel]):
    """Repository for packaging session CRUD operations."""

    model_type = PackagingSessionModel

    async def get_by_session_key(self, session_key: str) -> PackagingSessionModel | None:
        """Get a session by the id issued by the session manager."""
        return await self.get_one_or_none(session_key=session_key)

    async def find_by_operator(
        self,
        operator: str,
        status: SessionStatus | None = None,
    ) -> Sequence[PackagingSessionModel]:
        """Find sessions run by an operator, newest first.

        Args:
            operator: The operator name.
            status: Optional status filter.

        Returns:
            List of packaging sessions.
        """
        conditions = [PackagingSessionModel.operator == operator]

        if status:
            conditions.append(PackagingSessionModel.status == status)

        stmt = (
            select(PackagingSessionModel)
            .where(and_(*conditions))
            .order_by(PackagingSessionModel.start_time.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


class BatchCodeGenerationRepository(SQLAlchemyAsyncRepository[BatchCodeGenerationModel]):
    """Repository for the batch code generation history."""

    model_type = BatchCodeGenerationModel

    async def find_by_code(self, code: str) -> Sequence[BatchCodeGenerationModel]:
        """Find every generation of ``code``; more than one means a collision."""
        stmt = (
            select(BatchCodeGenerationModel)
            .where(BatchCodeGenerationModel.code == code)
            .order_by(BatchCodeGenerationModel.generated_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
