"""Shared test fixtures for the cliniio-sterilization test suite."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from cliniio_sterilization.engine.batches import BatchTracker
from cliniio_sterilization.engine.codes import BatchCodeGenerator
from cliniio_sterilization.engine.orchestrator import SterilizationOrchestrator
from cliniio_sterilization.engine.packaging import PackagingSessionManager

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 12, tzinfo=timezone.utc)


class StepClock:
    """Clock that returns a fixed time until it is advanced."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> StepClock:
    """Pinned clock starting at 2024-03-15 09:30:12 UTC."""
    return StepClock()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so batch code suffixes are reproducible."""
    return random.Random(1234)


@pytest.fixture
def code_generator(clock: StepClock, rng: random.Random) -> BatchCodeGenerator:
    return BatchCodeGenerator(clock=clock, rng=rng)


@pytest.fixture
def session_manager(clock: StepClock) -> PackagingSessionManager:
    return PackagingSessionManager(clock=clock)


@pytest.fixture
def batch_tracker(code_generator: BatchCodeGenerator, clock: StepClock) -> BatchTracker:
    return BatchTracker(codes=code_generator, clock=clock)


@pytest.fixture
def orchestrator(clock: StepClock, rng: random.Random) -> SterilizationOrchestrator:
    """Orchestrator with a pinned clock and seeded random source.

    Returns:
        SterilizationOrchestrator at the idle baseline.
    """
    return SterilizationOrchestrator(clock=clock, rng=rng)


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers.

    Args:
        config: Pytest config object
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
