from .geometry import Point, to_world, to_canvas
from .equilibrium import EquilibriumResult, SINGULAR_RESULT, solve, net_torque, force_arrow
from .labels import LabelPlacement, place_label, place_labels, OCTANT_NAMES, OCTANT_TEXT_ANCHORS
from .persistence import (
    FIELD_NAMES,
    PersistedState,
    EncodedState,
    StateSource,
    StateDecodeError,
    decode_from_query,
    decode_from_storage_blob,
    encode,
    resolve_initial_state,
    MemoryStorage,
    JsonFileStorage,
    UrlLocation,
    StatePersistence,
)
from .state import (
    DiagramState,
    DEFAULT_STATE,
    DEFAULT_PERSISTED_STATE,
    apply_drag,
    apply_control_change,
    pick_point,
)
from .session import DiagramSession, Frame
from .config import DiagramConfig, get_diagram_config, set_diagram_config
from .report import format_report, format_labels

__all__ = [
    'Point',
    'to_world',
    'to_canvas',
    'EquilibriumResult',
    'SINGULAR_RESULT',
    'solve',
    'net_torque',
    'force_arrow',
    'LabelPlacement',
    'place_label',
    'place_labels',
    'OCTANT_NAMES',
    'OCTANT_TEXT_ANCHORS',
    'FIELD_NAMES',
    'PersistedState',
    'EncodedState',
    'StateSource',
    'StateDecodeError',
    'decode_from_query',
    'decode_from_storage_blob',
    'encode',
    'resolve_initial_state',
    'MemoryStorage',
    'JsonFileStorage',
    'UrlLocation',
    'StatePersistence',
    'DiagramState',
    'DEFAULT_STATE',
    'DEFAULT_PERSISTED_STATE',
    'apply_drag',
    'apply_control_change',
    'pick_point',
    'DiagramSession',
    'Frame',
    'DiagramConfig',
    'get_diagram_config',
    'set_diagram_config',
    'format_report',
    'format_labels',
]
