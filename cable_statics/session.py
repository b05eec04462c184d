"""A diagram session: owns the live state and wires commands to persistence.

The session exposes no loop of its own. A host calls :meth:`DiagramSession.update`
once per display refresh and forwards pointer and control events to the
command methods. Saving happens on drag release and on control changes, never
per frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .config import DiagramConfig, get_diagram_config
from .equilibrium import EquilibriumResult, solve
from .geometry import Point, flip_direction, point_to_canvas, to_world
from .labels import LabelPlacement, place_labels
from .persistence import StateLocation, StatePersistence, StateSource, StateStorage
from .state import (
    DEFAULT_STATE,
    DiagramState,
    apply_control_change,
    apply_drag,
    pick_point,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs for one tick."""

    state: DiagramState
    result: EquilibriumResult
    labels: Dict[str, LabelPlacement]


class DiagramSession:
    def __init__(
        self,
        storage: StateStorage,
        location: StateLocation,
        config: Optional[DiagramConfig] = None,
        defaults: DiagramState = DEFAULT_STATE,
    ) -> None:
        self.config = config or get_diagram_config()
        self.defaults = defaults
        self.persistence = StatePersistence(storage, location, defaults.to_persisted())
        persisted, self.source = self.persistence.load()
        self.state = DiagramState.from_persisted(persisted)
        self.selected: Optional[str] = None
        logger.info(
            "Diagram session started from %s on a %gx%g canvas",
            self.source.value,
            self.config.canvas_width,
            self.config.canvas_height,
        )

    # -- per-tick ---------------------------------------------------------

    def update(self) -> Frame:
        state = self.state
        cfg = self.config
        result = solve(
            state.pivot,
            state.anchor_a,
            state.anchor_b,
            state.load,
            state.force_magnitude,
            state.force_direction,
            singular_threshold=cfg.singular_threshold,
        )
        canvas_points = {
            name: point_to_canvas(point, cfg.canvas_width, cfg.canvas_height)
            for name, point in state.points().items()
        }
        labels = place_labels(
            canvas_points,
            flip_direction(state.force_direction),
            cfg.canvas_width,
            cfg.canvas_height,
            offset=cfg.label_offset,
            label_size=(cfg.label_width, cfg.label_height),
            margin=cfg.edge_margin,
            penalty=cfg.edge_penalty,
            spread=cfg.obstruction_spread,
        )
        return Frame(state=state, result=result, labels=labels)

    # -- pointer commands -------------------------------------------------

    def begin_drag(self, canvas_x: float, canvas_y: float) -> Optional[str]:
        self.selected = pick_point(
            self.state,
            canvas_x,
            canvas_y,
            self.config.canvas_width,
            self.config.canvas_height,
            radius=self.config.point_radius,
        )
        if self.selected is not None:
            logger.debug("Dragging %s", self.selected)
        return self.selected

    def drag_to(self, canvas_x: float, canvas_y: float) -> None:
        if self.selected is None:
            return
        position = to_world(canvas_x, canvas_y, self.config.canvas_width, self.config.canvas_height)
        self.state = apply_drag(self.state, self.selected, position)

    def end_drag(self) -> bool:
        """Release the dragged point (pointer up or leaving the canvas) and save."""

        if self.selected is None:
            return False
        self.selected = None
        return self.save()

    def move_point(self, name: str, position: Point) -> bool:
        """Place ``name`` at a world-frame ``position`` in one step and save."""

        self.state = apply_drag(self.state, name, position)
        return self.save()

    # -- control commands -------------------------------------------------

    def set_control(self, control: str, raw: object) -> bool:
        self.state = apply_control_change(self.state, control, raw)
        return self.save()

    def set_force_magnitude(self, raw: object) -> bool:
        return self.set_control("force_magnitude", raw)

    def set_force_direction(self, raw: object) -> bool:
        return self.set_control("force_direction", raw)

    # -- persistence ------------------------------------------------------

    def save(self) -> bool:
        return self.persistence.save(self.state.to_persisted())

    def reset(self) -> DiagramState:
        defaults = self.persistence.reset()
        self.state = DiagramState.from_persisted(defaults, version=self.state.version + 1)
        self.selected = None
        self.source = StateSource.DEFAULTS
        return self.state
