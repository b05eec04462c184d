"""Configuration for diagram sessions."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class DiagramConfig:
    """Tunable constants shared by the session, the solver and the label layout."""

    canvas_width: float = 500.0
    canvas_height: float = 400.0
    point_radius: float = 8.0
    label_offset: float = 25.0
    label_width: float = 20.0
    label_height: float = 14.0
    edge_margin: float = 5.0
    edge_penalty: int = 2
    obstruction_spread: float = 0.1
    singular_threshold: float = 1e-6


_DIAGRAM_CONFIG = DiagramConfig()


def get_diagram_config() -> DiagramConfig:
    return copy.deepcopy(_DIAGRAM_CONFIG)


def set_diagram_config(config: DiagramConfig) -> None:
    global _DIAGRAM_CONFIG
    _DIAGRAM_CONFIG = copy.deepcopy(config)
