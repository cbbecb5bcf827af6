"""Tests for batch code generation and lookup."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest

from cliniio_sterilization.core.models import SterilizationBatch
from cliniio_sterilization.engine.codes import (
    BatchCodeGenerator,
    as_utc,
    get_batch_by_code,
    validate_batch_code,
)

if TYPE_CHECKING:
    from conftest import StepClock


@pytest.mark.unit
class TestGenerateBatchCode:
    """Tests for BatchCodeGenerator.generate_batch_code."""

    def test_code_shape_and_prefix(self, code_generator: BatchCodeGenerator) -> None:
        """The code carries the UTC date and time to the minute."""
        code = code_generator.generate_batch_code("Dr. Smith", 3)

        assert validate_batch_code(code)
        assert code.startswith("20240315-0930-")
        assert len(code) == 17

    def test_records_history(self, code_generator: BatchCodeGenerator, clock: StepClock) -> None:
        code = code_generator.generate_batch_code("Dr. Smith", 1)

        assert len(code_generator.history) == 1
        generation = code_generator.history[0]
        assert generation.code == code
        assert generation.operator == "Dr. Smith"
        assert generation.tool_count == 1
        assert generation.is_single_tool is True
        assert generation.generated_at == clock.now
        assert code_generator.last_generated is generation
        assert code_generator.last_generated_code == code

    def test_history_is_append_only(self, code_generator: BatchCodeGenerator, clock: StepClock) -> None:
        first = code_generator.generate_batch_code("Dr. Smith", 2)
        clock.advance(minutes=5)
        second = code_generator.generate_batch_code("Nurse Jones", 0)

        assert [g.code for g in code_generator.history] == [first, second]
        assert second.startswith("20240315-0935-")
        assert code_generator.last_generated_code == second
        assert code_generator.last_generated.is_single_tool is False

    def test_empty_history(self) -> None:
        generator = BatchCodeGenerator()

        assert generator.history == []
        assert generator.last_generated is None
        assert generator.last_generated_code is None

    def test_seeded_generators_agree(self, clock: StepClock) -> None:
        first = BatchCodeGenerator(clock=clock, rng=random.Random(7))
        second = BatchCodeGenerator(clock=clock, rng=random.Random(7))

        assert first.generate_batch_code("a", 1) == second.generate_batch_code("b", 2)

    def test_non_utc_clock_is_converted(self) -> None:
        eastern = timezone(timedelta(hours=-5))
        generator = BatchCodeGenerator(clock=lambda: datetime(2024, 3, 14, 22, 15, tzinfo=eastern))

        code = generator.generate_batch_code("Dr. Smith", 1)

        assert code.startswith("20240315-0315-")

    def test_default_clock(self) -> None:
        code = BatchCodeGenerator().generate_batch_code("Dr. Smith", 1)

        assert validate_batch_code(code)


@pytest.mark.unit
class TestValidateBatchCode:
    """Tests for validate_batch_code."""

    @pytest.mark.parametrize("code", ["20240315-0930-A1B", "00000000-0000-000", "99999999-9999-ZZZ"])
    def test_valid_shapes(self, code: str) -> None:
        assert validate_batch_code(code) is True

    @pytest.mark.parametrize(
        "code",
        [
            "",
            "20240315-0930-a1b",
            "20240315-0930-A1",
            "20240315-0930-A1BC",
            "2024031-0930-A1B",
            "20240315_0930_A1B",
            " 20240315-0930-A1B",
            "20240315-0930-A1B\n",
        ],
    )
    def test_invalid_shapes(self, code: str) -> None:
        assert validate_batch_code(code) is False

    @pytest.mark.parametrize("value", [None, 20240315, ["20240315-0930-A1B"]])
    def test_non_strings(self, value: object) -> None:
        assert validate_batch_code(value) is False

    def test_date_part_not_checked(self) -> None:
        """Only the shape is validated, not the calendar."""
        assert validate_batch_code("20241399-2599-ABC") is True


@pytest.mark.unit
class TestGetBatchByCode:
    """Tests for get_batch_by_code."""

    @staticmethod
    def _batch(batch_id: str, code: str | None) -> SterilizationBatch:
        return SterilizationBatch(
            id=batch_id,
            created_by="Dr. Smith",
            created_at=datetime(2024, 3, 15, tzinfo=timezone.utc),
            batch_code=code,
        )

    def test_first_match_wins(self) -> None:
        batches = [
            self._batch("b1", None),
            self._batch("b2", "20240315-0930-A1B"),
            self._batch("b3", "20240315-0930-A1B"),
        ]

        assert get_batch_by_code("20240315-0930-A1B", batches).id == "b2"

    def test_missing_code(self) -> None:
        assert get_batch_by_code("20240315-0930-ZZZ", [self._batch("b1", "20240315-0930-A1B")]) is None

    def test_empty(self) -> None:
        assert get_batch_by_code("20240315-0930-A1B", []) is None


@pytest.mark.unit
class TestAsUtc:
    """Tests for as_utc."""

    def test_naive_is_taken_as_utc(self) -> None:
        assert as_utc(datetime(2024, 3, 15, 9, 30)) == datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)

    def test_aware_is_converted(self) -> None:
        value = datetime(2024, 3, 15, 10, 30, tzinfo=timezone(timedelta(hours=1)))

        result = as_utc(value)

        assert result.tzinfo == timezone.utc
        assert result.hour == 9
