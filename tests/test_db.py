"""Integration tests for the database persistence layer.

Tests the SQLAlchemy models, repositories, and SterilizationPersistence
using an async SQLite in-memory database.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING
from uuid import UUID

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cliniio_sterilization.core.models import PackageInfo, SterilizationInfo
from cliniio_sterilization.core.types import AuditAction, BatchStatus, SessionStatus
from cliniio_sterilization.db.models import PackagingSessionModel, SterilizationBatchModel
from cliniio_sterilization.db.persistence import SterilizationPersistence
from cliniio_sterilization.db.repositories import (
    BatchAuditEventRepository,
    BatchCodeGenerationRepository,
    PackagingSessionRepository,
    SterilizationBatchRepository,
)
from cliniio_sterilization.engine.orchestrator import SterilizationOrchestrator
from cliniio_sterilization.exceptions import BatchNotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from conftest import StepClock


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def async_engine():
    """Create an async SQLite in-memory engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(SterilizationBatchModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create an async session for testing."""
    session_maker = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def persistence(async_session: AsyncSession) -> SterilizationPersistence:
    return SterilizationPersistence(async_session)


@pytest.fixture
def packaged(orchestrator: SterilizationOrchestrator):
    """A finalized batch built through a packaging session."""
    orchestrator.packaging.start_packaging_session("Dr. Smith")
    orchestrator.packaging.add_tool_to_session("T-001")
    orchestrator.packaging.add_tool_to_session("T-002")
    return orchestrator.package_current_session(PackageInfo(package_type="wrap", package_size="large", notes="tray 4"))


# =============================================================================
# Persistence Tests
# =============================================================================


@pytest.mark.integration
class TestBatchPersistence:
    """Tests for saving and loading batches."""

    async def test_save_and_load(self, persistence: SterilizationPersistence, packaged) -> None:
        await persistence.save_batch(packaged)

        loaded = await persistence.load_batch(packaged.id)

        assert loaded.id == packaged.id
        assert loaded.batch_code == packaged.batch_code
        assert loaded.status == BatchStatus.READY
        assert loaded.created_by == "Dr. Smith"
        assert loaded.tools == ["T-001", "T-002"]
        assert loaded.package_info == packaged.package_info
        assert loaded.created_at.tzinfo is not None
        assert [e.action for e in loaded.audit_trail] == [AuditAction.CREATED, AuditAction.FINALIZED]
        assert [e.id for e in loaded.audit_trail] == [e.id for e in packaged.audit_trail]

    async def test_load_by_code(self, persistence: SterilizationPersistence, packaged) -> None:
        await persistence.save_batch(packaged)

        loaded = await persistence.load_batch_by_code(packaged.batch_code)

        assert loaded.id == packaged.id

    async def test_missing_batch(self, persistence: SterilizationPersistence) -> None:
        with pytest.raises(BatchNotFoundError):
            await persistence.load_batch("00000000-0000-0000-0000-000000000000")

        with pytest.raises(BatchNotFoundError, match="not-a-uuid"):
            await persistence.load_batch("not-a-uuid")

        with pytest.raises(BatchNotFoundError, match="20000101-0000-AAA"):
            await persistence.load_batch_by_code("20000101-0000-AAA")

    async def test_resave_appends_only_new_events(
        self,
        persistence: SterilizationPersistence,
        async_session: AsyncSession,
        orchestrator: SterilizationOrchestrator,
        packaged,
    ) -> None:
        await persistence.save_batch(packaged)
        orchestrator.batches.update_batch_status(packaged.id, BatchStatus.IN_AUTOCLAVE, "Tech Lee")

        await persistence.save_batch(packaged)

        events = await BatchAuditEventRepository(session=async_session).list_for_batch(UUID(packaged.id))
        assert len(events) == 3
        assert events[-1].action == AuditAction.STATUS_CHANGED
        loaded = await persistence.load_batch(packaged.id)
        assert loaded.status == BatchStatus.IN_AUTOCLAVE

    async def test_sterilization_info_round_trip(
        self,
        persistence: SterilizationPersistence,
        orchestrator: SterilizationOrchestrator,
        packaged,
    ) -> None:
        start = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)
        info = SterilizationInfo(
            cycle_id="C-42",
            autoclave_id="AC-1",
            start_time=start,
            end_time=start + timedelta(minutes=30),
            temperature=134.0,
            pressure=2.1,
        )
        orchestrator.batches.record_sterilization(packaged.id, info, "Tech Lee")

        await persistence.save_batch(packaged)
        loaded = await persistence.load_batch(packaged.id)

        assert loaded.sterilization_info == info


    async def test_load_batches_for_tool(
        self,
        persistence: SterilizationPersistence,
        async_session: AsyncSession,
        orchestrator: SterilizationOrchestrator,
        clock: StepClock,
        packaged,
    ) -> None:
        clock.advance(hours=1)
        later = orchestrator.batches.create_batch("Nurse Jones", tool_ids=["T-001"])
        other = orchestrator.batches.create_batch("Nurse Jones", tool_ids=["T-0011"])
        for batch in (packaged, later, other):
            await persistence.save_batch(batch)

        loaded = await persistence.load_batches_for_tool("T-001")

        assert [batch.id for batch in loaded] == [later.id, packaged.id]
        models = await SterilizationBatchRepository(session=async_session).find_by_tool("T-0011")
        assert [str(model.id) for model in models] == [other.id]


@pytest.mark.integration
class TestSessionPersistence:
    """Tests for saving and loading packaging sessions."""

    async def test_save_and_load(
        self,
        persistence: SterilizationPersistence,
        orchestrator: SterilizationOrchestrator,
    ) -> None:
        session = orchestrator.packaging.start_packaging_session("Dr. Smith", is_batch_mode=True)
        orchestrator.packaging.add_tool_to_session("T-001")

        await persistence.save_session(session)
        loaded = await persistence.load_session(session.id)

        assert loaded is not None
        assert loaded.id == session.id
        assert loaded.operator == "Dr. Smith"
        assert loaded.is_batch_mode is True
        assert loaded.tool_ids == ["T-001"]
        assert loaded.status == SessionStatus.ACTIVE

    async def test_update_existing(
        self,
        persistence: SterilizationPersistence,
        async_session: AsyncSession,
        orchestrator: SterilizationOrchestrator,
    ) -> None:
        session = orchestrator.packaging.start_packaging_session("Dr. Smith")
        await persistence.save_session(session)

        orchestrator.packaging.add_tool_to_session("T-002")
        session.status = SessionStatus.COMPLETED
        await persistence.save_session(session)

        repo = PackagingSessionRepository(session=async_session)
        assert await repo.count() == 1
        stored = await repo.find_by_operator("Dr. Smith", status=SessionStatus.COMPLETED)
        assert len(stored) == 1
        assert isinstance(stored[0], PackagingSessionModel)
        assert stored[0].scanned_tools[0]["id"] == "T-002"

    async def test_missing_session(self, persistence: SterilizationPersistence) -> None:
        assert await persistence.load_session("session_0") is None


@pytest.mark.integration
class TestRepositories:
    """Tests for repository queries."""

    async def test_find_by_status(
        self,
        persistence: SterilizationPersistence,
        async_session: AsyncSession,
        orchestrator: SterilizationOrchestrator,
    ) -> None:
        first = orchestrator.batches.create_batch("Dr. Smith")
        second = orchestrator.batches.create_batch("Nurse Jones")
        orchestrator.batches.finalize_batch(second.id, "Nurse Jones")
        await persistence.save_batch(first)
        await persistence.save_batch(second)

        repo = SterilizationBatchRepository(session=async_session)
        ready, total = await repo.find_by_status(BatchStatus.READY)

        assert total == 1
        assert str(ready[0].id) == second.id
        assert len(await repo.find_by_operator("Dr. Smith")) == 1

    async def test_code_generations(
        self,
        persistence: SterilizationPersistence,
        async_session: AsyncSession,
        orchestrator: SterilizationOrchestrator,
    ) -> None:
        code = orchestrator.codes.generate_batch_code("Dr. Smith", 1)

        await persistence.save_code_generation(orchestrator.codes.last_generated)

        stored = await BatchCodeGenerationRepository(session=async_session).find_by_code(code)
        assert len(stored) == 1
        assert stored[0].is_single_tool is True
        assert stored[0].operator == "Dr. Smith"
