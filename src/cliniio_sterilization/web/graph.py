"""Graph visualization of the phase transition table.

This module renders the workflow phases and their allowed transitions,
primarily as MermaidJS flowcharts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cliniio_sterilization.core.types import WorkflowPhase
from cliniio_sterilization.engine.transitions import PHASE_TRANSITIONS

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["generate_phase_graph", "parse_phase_graph_to_dict"]

INITIAL_PHASE = WorkflowPhase.IDLE
TERMINAL_PHASE = WorkflowPhase.COMPLETION


def _label(phase: WorkflowPhase) -> str:
    prefix = ""
    if phase == INITIAL_PHASE:
        prefix = "START: "
    elif phase == TERMINAL_PHASE:
        prefix = "END: "
    return f"{prefix}{phase.value.replace('_', ' ').title()}"


def generate_phase_graph(
    current_phase: WorkflowPhase | None = None,
    completed_phases: Iterable[WorkflowPhase] = (),
    failed_phases: Iterable[WorkflowPhase] = (),
) -> str:
    """Generate a MermaidJS flowchart of the phase transition table.

    Args:
        current_phase: Phase to highlight as current.
        completed_phases: Phases to highlight as completed.
        failed_phases: Phases to highlight as failed.

    Returns:
        A MermaidJS flowchart definition.

    Example:
        >>> print(generate_phase_graph().splitlines()[1])
            idle[START: Idle]
    """
    lines = ["graph TD"]

    for phase in WorkflowPhase:
        lines.append(f"    {phase.value}[{_label(phase)}]")

    for source, targets in PHASE_TRANSITIONS.items():
        for target in targets:
            lines.append(f"    {source.value} --> {target.value}")

    for phase in completed_phases:
        lines.append(f"    style {phase.value} fill:#90EE90,stroke:#006400,stroke-width:2px")

    for phase in failed_phases:
        lines.append(f"    style {phase.value} fill:#FFB6C1,stroke:#8B0000,stroke-width:2px")

    if current_phase is not None:
        lines.append(f"    style {current_phase.value} fill:#FFD700,stroke:#FFA500,stroke-width:3px")

    return "\n".join(lines)


def parse_phase_graph_to_dict(current_phase: WorkflowPhase | None = None) -> dict[str, Any]:
    """Describe the phase graph as JSON-serializable nodes and edges.

    Args:
        current_phase: Phase to flag as current.

    Returns:
        A dictionary containing ``nodes`` and ``edges`` lists.
    """
    nodes = [
        {
            "id": phase.value,
            "label": phase.value.replace("_", " ").title(),
            "is_initial": phase == INITIAL_PHASE,
            "is_terminal": phase == TERMINAL_PHASE,
            "is_current": phase == current_phase,
        }
        for phase in WorkflowPhase
    ]
    edges = [
        {"source": source.value, "target": target.value}
        for source, targets in PHASE_TRANSITIONS.items()
        for target in targets
    ]
    return {"nodes": nodes, "edges": edges}
