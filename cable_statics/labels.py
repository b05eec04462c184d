"""Greedy octant placement for point labels.

Every point gets one of eight candidate label positions on a ring around it.
Each candidate is scored by how many octant steps it sits from the nearest
obstruction (the lines to the other points and, for the load point, the force
arrow), and is penalised when the label box would crowd a canvas edge. Labels
do not see each other's placement.

Everything here is in the canvas frame: origin top-left, Y down. "Up" is
``-Y`` and the force direction is the canvas-frame angle of the arrow.

Obstruction sectors are numbered from angle -pi while candidate 0 points
along +X, so the two indices are half a turn apart: a line running straight
to the right blocks the "upper-left" and "left" candidates, and a label can
end up drawn over a horizontal line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .geometry import Point, vector
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

OCTANTS = 8
LABEL_OFFSET = 25.0
LABEL_WIDTH = 20.0
LABEL_HEIGHT = 14.0
EDGE_MARGIN = 5.0
EDGE_PENALTY = 2
OBSTRUCTION_SPREAD = 0.1

OCTANT_NAMES = [
    "right",
    "upper-right",
    "up",
    "upper-left",
    "left",
    "lower-left",
    "down",
    "lower-right",
]

# (align, baseline) so that the text grows away from the point.
OCTANT_TEXT_ANCHORS: Dict[int, Tuple[str, str]] = {
    0: ("left", "middle"),
    1: ("left", "bottom"),
    2: ("center", "bottom"),
    3: ("right", "bottom"),
    4: ("right", "middle"),
    5: ("right", "top"),
    6: ("center", "top"),
    7: ("left", "top"),
}


@dataclass(frozen=True)
class LabelPlacement:
    octant: int
    position: Point
    align: str
    baseline: str

    @property
    def octant_name(self) -> str:
        return OCTANT_NAMES[self.octant]


def candidate_offsets(offset: float = LABEL_OFFSET) -> List[Tuple[float, float]]:
    """Return the eight candidate offsets, counter-clockwise from "right"."""

    offsets = []
    for idx in range(OCTANTS):
        angle = idx * math.pi / 4
        # Screen Y grows downward, so "up" is a negative offset.
        offsets.append((offset * math.cos(angle), -offset * math.sin(angle)))
    return offsets


def obstruction_sectors(
    point: Point,
    all_points: Sequence[Point],
    force_direction_degrees: float,
    is_load_point: bool,
    *,
    spread: float = OBSTRUCTION_SPREAD,
) -> List[int]:
    """Return the sorted sector indices blocked by lines leaving ``point``."""

    angles: List[float] = []
    for other in all_points:
        if other == point:
            continue
        dx, dy = vector(point, other)
        angles.append(math.atan2(dy, dx))
    if is_load_point:
        angles.append(math.radians(force_direction_degrees))
    if not angles:
        return []

    base = np.array(angles)
    spread_angles = np.concatenate([base - spread, base, base + spread])
    sectors = np.floor((spread_angles + np.pi) * OCTANTS / (2 * np.pi)).astype(int) % OCTANTS
    return sorted(set(int(sector) for sector in sectors))


def _label_box(
    anchor: Tuple[float, float], align: str, baseline: str, width: float, height: float
) -> Tuple[float, float, float, float]:
    x, y = anchor
    if align == "left":
        left = x
    elif align == "right":
        left = x - width
    else:
        left = x - width / 2
    if baseline == "top":
        top = y
    elif baseline == "bottom":
        top = y - height
    else:
        top = y - height / 2
    return left, top, left + width, top + height


def _near_edge(
    box: Tuple[float, float, float, float],
    canvas_width: float,
    canvas_height: float,
    margin: float,
) -> bool:
    left, top, right, bottom = box
    return (
        left < margin
        or top < margin
        or right > canvas_width - margin
        or bottom > canvas_height - margin
    )


def score_candidates(
    point: Point,
    sectors: Sequence[int],
    canvas_width: float,
    canvas_height: float,
    *,
    offset: float = LABEL_OFFSET,
    label_size: Tuple[float, float] = (LABEL_WIDTH, LABEL_HEIGHT),
    margin: float = EDGE_MARGIN,
    penalty: int = EDGE_PENALTY,
) -> List[int]:
    scores: List[int] = []
    for idx, (dx, dy) in enumerate(candidate_offsets(offset)):
        if sectors:
            score = min(min(abs(idx - s), OCTANTS - abs(idx - s)) for s in sectors)
        else:
            score = OCTANTS // 2
        align, baseline = OCTANT_TEXT_ANCHORS[idx]
        box = _label_box((point.x + dx, point.y + dy), align, baseline, *label_size)
        if _near_edge(box, canvas_width, canvas_height, margin):
            score -= penalty
        scores.append(score)
    return scores


def place_label(
    point: Point,
    all_points: Sequence[Point],
    force_direction_degrees: float,
    is_load_point: bool,
    canvas_width: float,
    canvas_height: float,
    *,
    offset: float = LABEL_OFFSET,
    label_size: Tuple[float, float] = (LABEL_WIDTH, LABEL_HEIGHT),
    margin: float = EDGE_MARGIN,
    penalty: int = EDGE_PENALTY,
    spread: float = OBSTRUCTION_SPREAD,
) -> LabelPlacement:
    """Choose the label octant for ``point``; the lowest index wins ties."""

    sectors = obstruction_sectors(
        point, all_points, force_direction_degrees, is_load_point, spread=spread
    )
    scores = score_candidates(
        point,
        sectors,
        canvas_width,
        canvas_height,
        offset=offset,
        label_size=label_size,
        margin=margin,
        penalty=penalty,
    )
    best = max(range(OCTANTS), key=lambda idx: scores[idx])
    dx, dy = candidate_offsets(offset)[best]
    align, baseline = OCTANT_TEXT_ANCHORS[best]
    return LabelPlacement(
        octant=best,
        position=Point(point.x + dx, point.y + dy),
        align=align,
        baseline=baseline,
    )


def place_labels(
    points: Mapping[str, Point],
    force_direction_degrees: float,
    canvas_width: float,
    canvas_height: float,
    *,
    load_name: Optional[str] = "P3",
    **options: Any,
) -> Dict[str, LabelPlacement]:
    """Place a label for every named point; ``load_name`` also avoids the force arrow."""

    all_points = list(points.values())
    return {
        name: place_label(
            point,
            all_points,
            force_direction_degrees,
            name == load_name,
            canvas_width,
            canvas_height,
            **options,
        )
        for name, point in points.items()
    }


apply_debug_logging(globals(), logger=logger)
