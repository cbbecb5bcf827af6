"""Sterilization batch tracking.

The tracker owns the batches created in this process. Every mutation it
performs appends a ``BatchAuditEvent`` to the batch's trail. Mutations on an
unknown batch id are silently ignored and return None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from cliniio_sterilization.core.events import BatchAuditEvent
from cliniio_sterilization.core.models import PackageInfo, SterilizationBatch, SterilizationInfo
from cliniio_sterilization.core.types import AuditAction, BatchStatus
from cliniio_sterilization.engine.codes import BatchCodeGenerator, get_batch_by_code, utc_now

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

    from cliniio_sterilization.core.types import Clock

__all__ = ["BatchTracker"]

logger = logging.getLogger(__name__)


class BatchTracker:
    """In-memory store of sterilization batches and their audit trails.

    Attributes:
        codes: Generator used to issue codes when a batch is finalized.
        _batches: Batches keyed by id, in creation order.
    """

    def __init__(self, codes: BatchCodeGenerator | None = None, clock: Clock | None = None) -> None:
        """Initialize an empty tracker.

        Args:
            codes: Batch code generator. A new one is created if omitted.
            clock: Callable returning the current time. Defaults to UTC now.
        """
        self._clock = clock or utc_now
        self.codes = codes or BatchCodeGenerator(clock=self._clock)
        self._batches: dict[str, SterilizationBatch] = {}

    @property
    def batch_history(self) -> list[SterilizationBatch]:
        """All batches, oldest first."""
        return list(self._batches.values())

    def _record(
        self,
        batch: SterilizationBatch,
        action: AuditAction,
        operator: str,
        details: str,
        **data: Any,
    ) -> BatchAuditEvent:
        return batch.record(
            BatchAuditEvent(
                batch_id=batch.id,
                action=action,
                operator=operator,
                timestamp=self._clock(),
                details=details,
                data=data,
            )
        )

    def create_batch(
        self,
        operator: str,
        package_info: PackageInfo | None = None,
        tool_ids: Iterable[str] = (),
    ) -> SterilizationBatch:
        """Open a new batch in ``creating`` status.

        Args:
            operator: Operator creating the batch.
            package_info: Packaging details.
            tool_ids: Tools to seed the batch with.

        Returns:
            The new batch.
        """
        batch = SterilizationBatch(
            id=str(uuid4()),
            created_by=operator,
            created_at=self._clock(),
            status=BatchStatus.CREATING,
            tools=list(tool_ids),
            package_info=package_info or PackageInfo(),
        )
        self._batches[batch.id] = batch
        self._record(batch, AuditAction.CREATED, operator, "Batch created", tool_count=len(batch.tools))
        logger.info("Created batch %s for %s", batch.id, operator)
        return batch

    def get_batch_by_id(self, batch_id: str) -> SterilizationBatch | None:
        return self._batches.get(batch_id)

    def get_batch_by_code(self, code: str) -> SterilizationBatch | None:
        return get_batch_by_code(code, self._batches.values())

    def get_batches_by_status(self, status: BatchStatus) -> list[SterilizationBatch]:
        return [batch for batch in self._batches.values() if batch.status == status]

    def get_batches_for_tool(self, tool_id: str) -> list[SterilizationBatch]:
        """Every batch the tool has been packed into, oldest first."""
        return [batch for batch in self._batches.values() if tool_id in batch.tools]

    def get_most_recent_batch_for_tool(self, tool_id: str) -> SterilizationBatch | None:
        """The latest-created batch holding the tool, or None if it was never batched.

        Batches created at the same instant are ordered by creation order.
        """
        batches = sorted(self.get_batches_for_tool(tool_id), key=lambda batch: batch.created_at)
        return batches[-1] if batches else None

    def add_tool_to_batch(self, batch_id: str, tool_id: str, operator: str) -> SterilizationBatch | None:
        """Add a tool to a batch. Returns None if the batch is unknown."""
        batch = self._batches.get(batch_id)
        if batch is None:
            return None
        batch.tools.append(tool_id)
        self._record(batch, AuditAction.TOOL_ADDED, operator, f"Tool {tool_id} added", tool_id=tool_id)
        return batch

    def remove_tool_from_batch(self, batch_id: str, tool_id: str, operator: str) -> SterilizationBatch | None:
        """Remove a tool from a batch. Returns None if the batch is unknown.

        Removing a tool that is not in the batch changes nothing and writes no
        audit event.
        """
        batch = self._batches.get(batch_id)
        if batch is None:
            return None
        if tool_id in batch.tools:
            batch.tools.remove(tool_id)
            self._record(batch, AuditAction.TOOL_REMOVED, operator, f"Tool {tool_id} removed", tool_id=tool_id)
        return batch

    def finalize_batch(self, batch_id: str, operator: str) -> SterilizationBatch | None:
        """Issue a batch code and mark the batch ``ready``.

        Returns:
            The finalized batch, or None if the batch is unknown.
        """
        batch = self._batches.get(batch_id)
        if batch is None:
            return None
        code = self.codes.generate_batch_code(operator, len(batch.tools))
        batch.batch_code = code
        previous = batch.status
        batch.status = BatchStatus.READY
        self._record(
            batch,
            AuditAction.FINALIZED,
            operator,
            f"Batch finalized with code {code}",
            batch_code=code,
            from_status=previous.value,
            tool_count=len(batch.tools),
        )
        logger.info("Finalized batch %s as %s", batch.id, code)
        return batch

    def update_batch_status(self, batch_id: str, status: BatchStatus, operator: str) -> SterilizationBatch | None:
        """Set a batch's status without consulting the status table.

        Returns:
            The updated batch, or None if the batch is unknown.
        """
        batch = self._batches.get(batch_id)
        if batch is None:
            return None
        previous = batch.status
        batch.status = status
        self._record(
            batch,
            AuditAction.STATUS_CHANGED,
            operator,
            f"Status changed from {previous} to {status}",
            from_status=previous.value,
            to_status=status.value,
        )
        logger.info("Batch %s status %s -> %s", batch.id, previous, status)
        return batch

    def record_sterilization(
        self,
        batch_id: str,
        info: SterilizationInfo,
        operator: str,
    ) -> SterilizationBatch | None:
        """Attach autoclave telemetry to a batch. Returns None if the batch is unknown."""
        batch = self._batches.get(batch_id)
        if batch is None:
            return None
        batch.sterilization_info = info
        self._record(
            batch,
            AuditAction.STERILIZATION_RECORDED,
            operator,
            "Sterilization data recorded",
            **info.to_dict(),
        )
        return batch

    def add_batch(self, batch: SterilizationBatch) -> None:
        """Track a batch built elsewhere, e.g. one loaded from persistence."""
        self._batches[batch.id] = batch
