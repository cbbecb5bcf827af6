"""Batch code generation and lookup.

Batch codes are human-readable, time-ordered identifiers of the form
``YYYYMMDD-HHMM-XXX``: the UTC date, the UTC time to the minute and a
three-character random base-36 suffix.

The suffix comes from a non-cryptographic random source and is not checked
against previously issued codes, so two codes generated within the same
minute collide with probability 1/46656. Callers that need uniqueness must
check ``BatchCodeGenerator.history`` or their own store.
"""

from __future__ import annotations

import logging
import random
import re
import string
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from cliniio_sterilization.core.models import BatchCodeGeneration

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cliniio_sterilization.core.models import SterilizationBatch
    from cliniio_sterilization.core.types import Clock

__all__ = [
    "BATCH_CODE_PATTERN",
    "BatchCodeGenerator",
    "as_utc",
    "get_batch_by_code",
    "utc_now",
    "validate_batch_code",
]

logger = logging.getLogger(__name__)

BATCH_CODE_PATTERN = re.compile(r"[0-9]{8}-[0-9]{4}-[A-Z0-9]{3}")
"""Fixed shape of a batch code. Matched against the whole string."""

SUFFIX_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 3


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # naive datetimes are taken to already be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BatchCodeGenerator:
    """Generates batch codes and keeps the history of every generation.

    Attributes:
        history: Every generation record, oldest first. Append-only.
        last_generated: The most recent generation record, if any.

    Example:
        >>> generator = BatchCodeGenerator()
        >>> code = generator.generate_batch_code("Dr. Smith", tool_count=1)
        >>> validate_batch_code(code)
        True
        >>> generator.last_generated.is_single_tool
        True
    """

    def __init__(self, clock: Clock | None = None, rng: random.Random | None = None) -> None:
        """Initialize the generator.

        Args:
            clock: Callable returning the current time. Defaults to UTC now.
            rng: Random source for the code suffix. Defaults to an unseeded
                ``random.Random``.
        """
        self._clock = clock or utc_now
        self._rng = rng or random.Random()
        self.history: list[BatchCodeGeneration] = []
        self.last_generated: BatchCodeGeneration | None = None

    @property
    def last_generated_code(self) -> str | None:
        """Code of the most recent generation, if any."""
        return self.last_generated.code if self.last_generated else None

    def generate_batch_code(self, operator: str, tool_count: int) -> str:
        """Generate a new batch code and record the generation.

        Args:
            operator: Operator requesting the code.
            tool_count: Number of tools the code covers.

        Returns:
            The generated code.
        """
        now = as_utc(self._clock())
        suffix = "".join(self._rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
        code = f"{now:%Y%m%d}-{now:%H%M}-{suffix}"

        generation = BatchCodeGeneration(
            code=code,
            generated_at=now,
            operator=operator,
            tool_count=tool_count,
        )
        self.history.append(generation)
        self.last_generated = generation

        logger.debug("Generated batch code %s for %s (%d tools)", code, operator, tool_count)
        return code


def validate_batch_code(code: object) -> bool:
    """Check that a value has the shape of a batch code.

    Only the shape is checked; the date and time parts are not validated.

    Args:
        code: The value to check.

    Returns:
        True if ``code`` is a string matching ``YYYYMMDD-HHMM-XXX``.
    """
    return isinstance(code, str) and BATCH_CODE_PATTERN.fullmatch(code) is not None


def get_batch_by_code(code: str, batches: Iterable[SterilizationBatch]) -> SterilizationBatch | None:
    """Return the first batch whose code equals ``code``, or None."""
    for batch in batches:
        if batch.batch_code == code:
            return batch
    return None
