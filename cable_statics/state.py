"""The live diagram state and the commands that mutate it.

:class:`DiagramState` is an immutable record; commands take the current state
and return the next one with ``version`` bumped. Points are stored in the
world frame.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .geometry import Point, distance, to_canvas
from .persistence import PersistedState

logger = logging.getLogger(__name__)

POINT_NAMES: Tuple[str, ...] = ("P0", "P1", "P2", "P3")
_POINT_FIELDS: Dict[str, str] = {
    "P0": "pivot",
    "P1": "anchor_a",
    "P2": "anchor_b",
    "P3": "load",
}
CONTROLS: Tuple[str, ...] = ("force_magnitude", "force_direction")


@dataclass(frozen=True)
class DiagramState:
    pivot: Point
    anchor_a: Point
    anchor_b: Point
    load: Point
    force_magnitude: float
    force_direction: float
    version: int = 0

    def point(self, name: str) -> Point:
        try:
            return getattr(self, _POINT_FIELDS[name])
        except KeyError as exc:
            raise KeyError(f"Unknown point '{name}'") from exc

    def points(self) -> Dict[str, Point]:
        return {name: self.point(name) for name in POINT_NAMES}

    def to_persisted(self) -> PersistedState:
        return PersistedState(
            p0x=self.pivot.x,
            p0y=self.pivot.y,
            p1x=self.anchor_a.x,
            p1y=self.anchor_a.y,
            p2x=self.anchor_b.x,
            p2y=self.anchor_b.y,
            p3x=self.load.x,
            p3y=self.load.y,
            fm=self.force_magnitude,
            fd=self.force_direction,
        )

    @classmethod
    def from_persisted(cls, persisted: PersistedState, version: int = 0) -> "DiagramState":
        return cls(
            pivot=Point(persisted.p0x, persisted.p0y),
            anchor_a=Point(persisted.p1x, persisted.p1y),
            anchor_b=Point(persisted.p2x, persisted.p2y),
            load=Point(persisted.p3x, persisted.p3y),
            force_magnitude=persisted.fm,
            force_direction=persisted.fd,
            version=version,
        )


# Pivot above two anchors, load hanging below them, force pointing along +X
# (world frame, 500x400 canvas centred on the origin).
DEFAULT_STATE = DiagramState(
    pivot=Point(0.0, 150.0),
    anchor_a=Point(-150.0, 100.0),
    anchor_b=Point(150.0, 100.0),
    load=Point(0.0, -50.0),
    force_magnitude=50.0,
    force_direction=0.0,
)
DEFAULT_PERSISTED_STATE = DEFAULT_STATE.to_persisted()


def parse_control_value(raw: object) -> float:
    """Read a control value; anything that is not a finite number reads as ``0``."""

    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.info("Unparseable control value %r treated as 0", raw)
        return 0.0
    if not math.isfinite(value):
        logger.info("Non-finite control value %r treated as 0", raw)
        return 0.0
    return value


def apply_drag(state: DiagramState, name: str, position: Point) -> DiagramState:
    """Move point ``name`` to ``position`` (world frame)."""

    if name not in _POINT_FIELDS:
        raise KeyError(f"Unknown point '{name}'")
    return replace(state, **{_POINT_FIELDS[name]: position, "version": state.version + 1})


def apply_control_change(state: DiagramState, control: str, raw: object) -> DiagramState:
    """Apply a force control change; magnitude is clamped at zero."""

    value = parse_control_value(raw)
    if control == "force_magnitude":
        value = max(value, 0.0)
    elif control != "force_direction":
        raise ValueError(f"Unknown control '{control}', expected one of {CONTROLS}")
    return replace(state, **{control: value, "version": state.version + 1})


def pick_point(
    state: DiagramState,
    canvas_x: float,
    canvas_y: float,
    canvas_width: float,
    canvas_height: float,
    radius: float = 8.0,
) -> Optional[str]:
    """Return the first point whose marker (in canvas pixels) is under the pointer."""

    pointer = Point(canvas_x, canvas_y)
    for name in POINT_NAMES:
        world = state.point(name)
        marker = to_canvas(world.x, world.y, canvas_width, canvas_height)
        if distance(pointer, marker) < radius:
            return name
    return None


__all__ = [
    "POINT_NAMES",
    "CONTROLS",
    "DiagramState",
    "DEFAULT_STATE",
    "DEFAULT_PERSISTED_STATE",
    "parse_control_value",
    "apply_drag",
    "apply_control_change",
    "pick_point",
]
