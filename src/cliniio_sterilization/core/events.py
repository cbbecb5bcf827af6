"""Audit events for sterilization batches.

Every mutation applied to a batch through the batch tracker is recorded as a
``BatchAuditEvent``. Events are frozen and the trail that holds them is only
ever appended to, so the history of a batch can be replayed or handed to an
external audit store without reconciliation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from cliniio_sterilization.core.types import AuditAction, Record

__all__ = ["BatchAuditEvent"]


@dataclass(frozen=True)
class BatchAuditEvent:
    """Single immutable entry in a batch's audit trail.

    Attributes:
        batch_id: Identifier of the batch the event belongs to.
        action: What happened to the batch.
        operator: Name of the operator who performed the action.
        timestamp: When the action happened.
        details: Human-readable description of the action.
        data: Optional structured payload (tool id, old/new status, ...).
            Stored as a read-only copy of the mapping passed in.
        id: Unique identifier of the event.

    Example:
        >>> from datetime import datetime, timezone
        >>> event = BatchAuditEvent(
        ...     batch_id="b1",
        ...     action=AuditAction.CREATED,
        ...     operator="Dr. Smith",
        ...     timestamp=datetime.now(timezone.utc),
        ...     details="Batch created",
        ... )
    """

    batch_id: str
    action: AuditAction
    operator: str
    timestamp: datetime
    details: str = ""
    data: Mapping[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> Record:
        """Serialize the event into a JSON-compatible record."""
        return {
            "id": self.id,
            "batch_id": self.batch_id,
            "action": self.action.value,
            "operator": self.operator,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
            "data": dict(self.data),
        }
