"""Plain-text read-out of a diagram frame."""

from __future__ import annotations

from typing import List, Mapping, Optional

from .equilibrium import EquilibriumResult
from .labels import LabelPlacement
from .state import POINT_NAMES, DiagramState


def _format_point(state: DiagramState, name: str) -> str:
    point = state.point(name)
    return f"({point.x:.0f}, {point.y:.0f})"


def _format_direction(value: float) -> str:
    return f"{value:g}"


def format_report(state: DiagramState, result: EquilibriumResult) -> List[str]:
    """Return the read-out lines: coordinates, tensions, forces and torques."""

    lines = [f"{name}: {_format_point(state, name)}" for name in POINT_NAMES]
    lines.extend(
        [
            f"Tension P1-P3: {abs(result.tension_a):.1f} N",
            f"Tension P2-P3: {abs(result.tension_b):.1f} N",
            f"Force at P3: {state.force_magnitude:.1f} N at {_format_direction(state.force_direction)}°",
            f"Force at P1: ({result.force_a_x:.1f}i, {result.force_a_y:.1f}j) N",
            f"Force at P2: ({result.force_b_x:.1f}i, {result.force_b_y:.1f}j) N",
            f"Torque P1 about P0: {result.torque_a:.1f} N⋅m",
            f"Torque P2 about P0: {result.torque_b:.1f} N⋅m",
            f"Net torque: {result.net_torque:.1f} N⋅m",
        ]
    )
    return lines


def format_labels(labels: Mapping[str, LabelPlacement], names: Optional[List[str]] = None) -> List[str]:
    lines = []
    for name in names or list(labels):
        placement = labels[name]
        lines.append(
            f"{name}: {placement.octant_name} at ({placement.position.x:.1f}, {placement.position.y:.1f})"
            f" align={placement.align} baseline={placement.baseline}"
        )
    return lines
