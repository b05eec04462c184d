"""Static equilibrium of a two-cable hanger.

Both cables meet at the load point, where the applied force acts. The solver
balances the two cable tensions against that force and reports the reaction
each anchor feels together with its torque about the pivot.

All inputs are expressed in the world frame (Y up, directions measured
counter-clockwise from +X in degrees).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np

from .geometry import Point, Vec2
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

SINGULAR_DET = 1e-6
ARROW_HEAD_LENGTH = 10.0
ARROW_HEAD_ANGLE = np.pi / 6


@dataclass(frozen=True)
class EquilibriumResult:
    tension_a: float = 0.0
    tension_b: float = 0.0
    force_a_x: float = 0.0
    force_a_y: float = 0.0
    force_b_x: float = 0.0
    force_b_y: float = 0.0
    torque_a: float = 0.0
    torque_b: float = 0.0

    @property
    def net_torque(self) -> float:
        return self.torque_a + self.torque_b

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


SINGULAR_RESULT = EquilibriumResult()


def solve(
    pivot: Point,
    anchor_a: Point,
    anchor_b: Point,
    load: Point,
    force_magnitude: float,
    force_direction_degrees: float,
    *,
    singular_threshold: float = SINGULAR_DET,
) -> EquilibriumResult:
    """Solve ``tension_a * uA + tension_b * uB + F = 0`` at the load point.

    ``uA``/``uB`` are the unit vectors from the load point toward each anchor.
    Tensions are signed: a negative value means the cable would have to push.
    When the cables are (anti)parallel the system is singular and the all-zero
    :data:`SINGULAR_RESULT` is returned. An anchor sitting exactly on the load
    point leaves its unit vector undefined and NaN propagates to every output.
    """

    theta = np.radians(force_direction_degrees)
    force = force_magnitude * np.array([np.cos(theta), np.sin(theta)])

    anchors = np.array([anchor_a.as_tuple(), anchor_b.as_tuple()])
    cables = anchors - np.array(load.as_tuple())
    with np.errstate(divide="ignore", invalid="ignore"):
        units = cables / np.hypot(cables[:, 0], cables[:, 1])[:, None]
    (uax, uay), (ubx, uby) = units

    det = uax * uby - ubx * uay
    if abs(det) < singular_threshold:
        logger.debug("Cables are parallel (det=%.3e); returning zero result", det)
        return SINGULAR_RESULT

    fx, fy = force
    tensions = np.array([(-fx * uby + fy * ubx) / det, (fx * uay - fy * uax) / det])

    reactions = -tensions[:, None] * units
    arms = anchors - np.array(pivot.as_tuple())
    torques = arms[:, 0] * reactions[:, 1] - arms[:, 1] * reactions[:, 0]

    return EquilibriumResult(
        tension_a=float(tensions[0]),
        tension_b=float(tensions[1]),
        force_a_x=float(reactions[0, 0]),
        force_a_y=float(reactions[0, 1]),
        force_b_x=float(reactions[1, 0]),
        force_b_y=float(reactions[1, 1]),
        torque_a=float(torques[0]),
        torque_b=float(torques[1]),
    )


def net_torque(result: EquilibriumResult) -> float:
    return result.net_torque


def force_arrow(
    load: Point,
    force_magnitude: float,
    force_direction_degrees: float,
    *,
    head_length: float = ARROW_HEAD_LENGTH,
) -> Tuple[Vec2, Vec2, Vec2]:
    """Return ``(tip, head_left, head_right)`` for the applied-force arrow.

    The shaft is as long as the force magnitude. The formula is frame
    agnostic: pass canvas coordinates and a canvas-frame direction to get
    canvas output.
    """

    theta = np.radians(force_direction_degrees)
    tip = (
        load.x + float(np.cos(theta)) * force_magnitude,
        load.y + float(np.sin(theta)) * force_magnitude,
    )
    heads = []
    for sign in (-1.0, 1.0):
        angle = theta + sign * ARROW_HEAD_ANGLE
        heads.append(
            (
                tip[0] - head_length * float(np.cos(angle)),
                tip[1] - head_length * float(np.sin(angle)),
            )
        )
    return tip, heads[0], heads[1]


apply_debug_logging(globals(), logger=logger)
