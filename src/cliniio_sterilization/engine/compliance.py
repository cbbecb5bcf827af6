"""Compliance checks over workflow telemetry.

Only the presence of the monitored fields is checked, not whether their
values are in range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from cliniio_sterilization.core.types import Record

__all__ = [
    "REQUIRED_MONITORING",
    "ComplianceResult",
    "calculate_workflow_duration",
    "check_compliance",
]

REQUIRED_MONITORING: tuple[tuple[str, str], ...] = (
    ("temperature", "Temperature monitoring required"),
    ("pressure", "Pressure monitoring required"),
    ("duration", "Duration tracking required"),
)
"""Pairs of (field name, issue reported when the field is missing)."""


@dataclass(frozen=True)
class ComplianceResult:
    """Outcome of a compliance check.

    Attributes:
        compliant: True iff ``issues`` is empty.
        issues: Human-readable description of each gap found.
    """

    compliant: bool
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> Record:
        return {"compliant": self.compliant, "issues": list(self.issues)}


def check_compliance(workflow_data: Mapping[str, Any]) -> ComplianceResult:
    """Check that workflow telemetry carries every monitored field.

    A field counts as present when its key exists with a value other than
    None. Zero is a present value.

    Args:
        workflow_data: Telemetry for one cycle.

    Returns:
        The compliance result, listing one issue per missing field.

    Example:
        >>> check_compliance({"temperature": 121, "pressure": 15, "duration": 30}).compliant
        True
    """
    issues = [issue for key, issue in REQUIRED_MONITORING if workflow_data.get(key) is None]
    return ComplianceResult(compliant=not issues, issues=issues)


def calculate_workflow_duration(start: datetime, end: datetime) -> int:
    """Return ``end - start`` in whole milliseconds.

    The result is negative when ``end`` precedes ``start``; it is not clamped.
    """
    delta = end - start
    return (delta.days * 86_400_000) + (delta.seconds * 1000) + (delta.microseconds // 1000)
