"""SQLAlchemy models for sterilization persistence.

This module defines the tables handed records by the persistence adapter:
- SterilizationBatchModel: Batches with their package and autoclave data
- BatchAuditEventModel: Insert-only audit trail entries of a batch
- PackagingSessionModel: Packaging sessions and their scanned tools
- BatchCodeGenerationModel: History of generated batch codes
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cliniio_sterilization.core.types import AuditAction, BatchStatus, SessionStatus

__all__ = [
    "BatchAuditEventModel",
    "BatchCodeGenerationModel",
    "PackagingSessionModel",
    "SterilizationBatchModel",
]


# Cross-database JSON type: uses JSONB for PostgreSQL, JSON for others (SQLite, MySQL, etc.)
JSONType = JSON().with_variant(JSONB, "postgresql")


class SterilizationBatchModel(UUIDAuditBase):
    """Persisted sterilization batch.

    The primary key is the batch id issued by the batch tracker.

    Attributes:
        batch_code: Generated batch code, null until the batch is finalized.
        created_by: Operator who created the batch.
        opened_at: When the batch was created by the operator.
        status: Lifecycle status.
        tools: Ids of the tools in the batch.
        package_info: Packaging details as JSON.
        sterilization_info: Autoclave telemetry as JSON.
        audit_events: Related audit trail entries.
    """

    __tablename__ = "sterilization_batches"
    __table_args__ = (
        Index("ix_sterilization_batches_status", "status"),
        Index("ix_sterilization_batches_batch_code", "batch_code"),
        Index("ix_sterilization_batches_created_by", "created_by"),
    )

    batch_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_by: Mapped[str] = mapped_column(String(255))
    opened_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[BatchStatus] = mapped_column(
        Enum(BatchStatus, native_enum=False, length=50),
        default=BatchStatus.CREATING,
    )
    tools: Mapped[list[str]] = mapped_column(JSONType, default=list)
    package_info: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    sterilization_info: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    # Relationships
    audit_events: Mapped[list[BatchAuditEventModel]] = relationship(
        back_populates="batch",
        lazy="noload",
        order_by="BatchAuditEventModel.sequence",
    )


class BatchAuditEventModel(UUIDAuditBase):
    """One audit trail entry of a batch. Rows are inserted, never updated.

    Attributes:
        batch_id: Foreign key to the batch.
        sequence: Position of the entry in the batch's trail.
        action: What happened to the batch.
        operator: Operator who performed the action.
        timestamp: When the action happened.
        details: Human-readable description.
        data: Structured payload.
    """

    __tablename__ = "sterilization_batch_audit_events"
    __table_args__ = (
        Index("ix_batch_audit_events_batch_id", "batch_id"),
        Index("ix_batch_audit_events_action", "action"),
    )

    batch_id: Mapped[UUID] = mapped_column(
        ForeignKey("sterilization_batches.id", ondelete="CASCADE"),
    )
    sequence: Mapped[int] = mapped_column(default=0)
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction, native_enum=False, length=50),
    )
    operator: Mapped[str] = mapped_column(String(255))
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    # Relationships
    batch: Mapped[SterilizationBatchModel] = relationship(
        back_populates="audit_events",
    )


class PackagingSessionModel(UUIDAuditBase):
    """Persisted packaging session.

    Attributes:
        session_key: The session id issued by the session manager.
        operator: Operator who ran the session.
        start_time: When the session started.
        status: Lifecycle status.
        scanned_tools: Scanned tool stubs as JSON.
        is_batch_mode: Whether tools were scanned into a batch.
        batch_id: Associated batch id, if any.
    """

    __tablename__ = "packaging_sessions"
    __table_args__ = (
        Index("ix_packaging_sessions_session_key", "session_key", unique=True),
        Index("ix_packaging_sessions_operator", "operator"),
    )

    session_key: Mapped[str] = mapped_column(String(64))
    operator: Mapped[str] = mapped_column(String(255))
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False, length=50),
        default=SessionStatus.ACTIVE,
    )
    scanned_tools: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)
    is_batch_mode: Mapped[bool] = mapped_column(default=False)
    batch_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class BatchCodeGenerationModel(UUIDAuditBase):
    """One generated batch code.

    Attributes:
        code: The generated code.
        generated_at: When it was generated.
        operator: Operator who requested it.
        tool_count: Number of tools it was generated for.
        is_single_tool: Whether ``tool_count`` was exactly one.
    """

    __tablename__ = "batch_code_generations"
    __table_args__ = (
        Index("ix_batch_code_generations_code", "code"),
        Index("ix_batch_code_generations_operator", "operator"),
    )

    code: Mapped[str] = mapped_column(String(32))
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    operator: Mapped[str] = mapped_column(String(255))
    tool_count: Mapped[int] = mapped_column(default=0)
    is_single_tool: Mapped[bool] = mapped_column(default=False)
