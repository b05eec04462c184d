"""Points, canvas/world transforms and small 2D vector helpers.

The canvas frame has its origin at the top-left corner with Y growing
downward. The world frame has its origin at the canvas centre with Y growing
upward. Both are measured in the same units (device pixels).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

Vec2 = Tuple[float, float]


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def as_tuple(self) -> Vec2:
        return (self.x, self.y)


def to_world(canvas_x: float, canvas_y: float, width: float, height: float) -> Point:
    """Convert canvas coordinates into the world frame."""

    return Point(canvas_x - width / 2.0, height / 2.0 - canvas_y)


def to_canvas(world_x: float, world_y: float, width: float, height: float) -> Point:
    """Convert world coordinates into the canvas frame."""

    return Point(world_x + width / 2.0, height / 2.0 - world_y)


def point_to_canvas(point: Point, width: float, height: float) -> Point:
    return to_canvas(point.x, point.y, width, height)


def flip_direction(direction_degrees: float) -> float:
    """Mirror an angle across the X axis, i.e. move it between frames."""

    return -direction_degrees


def vector(a: Point, b: Point) -> Vec2:
    return b.x - a.x, b.y - a.y


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


__all__ = [
    "Point",
    "Vec2",
    "to_world",
    "to_canvas",
    "point_to_canvas",
    "flip_direction",
    "vector",
    "distance",
]
