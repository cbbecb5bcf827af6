"""Exception hierarchy for cliniio-sterilization.

Validation failures, compliance gaps and mutations of missing state are
reported as return values, never raised. The exceptions below are reserved
for lookups that must produce a value and for unparseable input arriving at
a system edge.
"""

from __future__ import annotations

__all__ = (
    "BatchNotFoundError",
    "InvalidPhaseError",
    "InvalidStatusError",
    "NoActiveSessionError",
    "SterilizationError",
)


class SterilizationError(Exception):
    """Base exception for all cliniio-sterilization errors.

    All exceptions raised by cliniio-sterilization inherit from this class,
    so callers can catch every sterilization error with a single except clause.
    """


class BatchNotFoundError(SterilizationError):
    """Raised when a batch is looked up by id or code and does not exist.

    Attributes:
        batch_id: The id or code that was looked up.
    """

    def __init__(self, batch_id: str) -> None:
        """Initialize the exception with the missing batch reference.

        Args:
            batch_id: The id or code that was looked up.
        """
        self.batch_id = batch_id
        super().__init__(f"Batch '{batch_id}' not found")


class NoActiveSessionError(SterilizationError):
    """Raised when a caller requires the current packaging session and there is none."""

    def __init__(self) -> None:
        super().__init__("No active packaging session")


class InvalidPhaseError(SterilizationError, ValueError):
    """Raised when a string cannot be parsed into a workflow phase.

    Attributes:
        value: The offending value.
    """

    def __init__(self, value: object) -> None:
        """Initialize the exception with the unparseable value.

        Args:
            value: The offending value.
        """
        self.value = value
        super().__init__(f"Unknown workflow phase '{value}'")


class InvalidStatusError(SterilizationError, ValueError):
    """Raised when a string cannot be parsed into a batch status.

    Attributes:
        value: The offending value.
    """

    def __init__(self, value: object) -> None:
        """Initialize the exception with the unparseable value.

        Args:
            value: The offending value.
        """
        self.value = value
        super().__init__(f"Unknown batch status '{value}'")
