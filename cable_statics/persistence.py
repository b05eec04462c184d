"""Persisted diagram state: codec, source precedence and the save/reset policy.

A persisted state is exactly ten finite numbers in the world frame. It lives
in two external stores: the page URL's query string and a single storage
blob (JSON). Both stores are reached through small capability objects so the
policy below can be exercised without a browser.
"""

from __future__ import annotations

import json
import logging
import math
import numbers
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, NamedTuple, Optional, Protocol, Sequence, Tuple, Union
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

FIELD_NAMES: Tuple[str, ...] = (
    "p0x",
    "p0y",
    "p1x",
    "p1y",
    "p2x",
    "p2y",
    "p3x",
    "p3y",
    "fm",
    "fd",
)

QueryInput = Union[str, Mapping[str, Union[str, Sequence[str]]], None]


class StateDecodeError(ValueError):
    """Raised when an external state source is incomplete or not numeric."""


@dataclass(frozen=True)
class PersistedState:
    p0x: float
    p0y: float
    p1x: float
    p1y: float
    p2x: float
    p2y: float
    p3x: float
    p3y: float
    fm: float
    fd: float

    def __post_init__(self) -> None:
        for field in fields(self):
            object.__setattr__(self, field.name, float(getattr(self, field.name)))

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class EncodedState(NamedTuple):
    query: str
    blob: str


class StateSource(str, Enum):
    QUERY = "query"
    STORAGE = "storage"
    DEFAULTS = "defaults"


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def _format_number(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _parse_query_value(name: str, raw: object) -> float:
    if isinstance(raw, (list, tuple)):
        if not raw:
            raise StateDecodeError(f"query field '{name}' is empty")
        raw = raw[0]
    if isinstance(raw, numbers.Real) and not isinstance(raw, bool):
        try:
            raw = repr(float(raw))
        except OverflowError as exc:
            raise StateDecodeError(f"query field '{name}' is out of range") from exc
    if not isinstance(raw, str) or not raw.strip():
        raise StateDecodeError(f"query field '{name}' is empty")
    try:
        value = float(raw)
    except (OverflowError, ValueError) as exc:
        raise StateDecodeError(f"query field '{name}' is not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise StateDecodeError(f"query field '{name}' is not finite: {raw!r}")
    return value


def _parse_blob_value(name: str, raw: object) -> float:
    if isinstance(raw, bool) or not isinstance(raw, numbers.Real):
        raise StateDecodeError(f"storage field '{name}' is not numeric: {raw!r}")
    try:
        value = float(raw)
    except OverflowError as exc:
        raise StateDecodeError(f"storage field '{name}' is out of range") from exc
    if not math.isfinite(value):
        raise StateDecodeError(f"storage field '{name}' is not finite: {raw!r}")
    return value


def parse_query(query: QueryInput) -> PersistedState:
    """Strict query decoder; raises :class:`StateDecodeError` on any defect."""

    if query is None:
        raise StateDecodeError("no query string")
    if isinstance(query, str):
        params: Mapping[str, object] = parse_qs(query.lstrip("?"), keep_blank_values=True)
    else:
        params = query
    missing = [name for name in FIELD_NAMES if name not in params]
    if missing:
        raise StateDecodeError(f"query is missing field(s): {', '.join(missing)}")
    return PersistedState(**{name: _parse_query_value(name, params[name]) for name in FIELD_NAMES})


def parse_storage_blob(raw: Union[str, bytes, None]) -> PersistedState:
    """Strict storage decoder; raises :class:`StateDecodeError` on any defect."""

    if raw is None:
        raise StateDecodeError("no storage blob")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise StateDecodeError(f"storage blob is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StateDecodeError("storage blob is not a flat record")
    missing = [name for name in FIELD_NAMES if name not in data]
    if missing:
        raise StateDecodeError(f"storage blob is missing field(s): {', '.join(missing)}")
    return PersistedState(**{name: _parse_blob_value(name, data[name]) for name in FIELD_NAMES})


def decode_from_query(query: QueryInput) -> Optional[PersistedState]:
    try:
        return parse_query(query)
    except StateDecodeError as exc:
        logger.info("Ignoring query state: %s", exc)
        return None


def decode_from_storage_blob(raw: Union[str, bytes, None]) -> Optional[PersistedState]:
    try:
        return parse_storage_blob(raw)
    except StateDecodeError as exc:
        logger.info("Ignoring stored state: %s", exc)
        return None


def encode(state: PersistedState) -> EncodedState:
    """Serialize ``state`` into its canonical query string and storage blob."""

    values = state.as_dict()
    query = urlencode([(name, _format_number(values[name])) for name in FIELD_NAMES])
    blob = json.dumps(values, sort_keys=True, separators=(",", ":"))
    return EncodedState(query=query, blob=blob)


def resolve_state_source(
    query: QueryInput,
    storage_blob: Union[str, bytes, None],
    defaults: PersistedState,
) -> Tuple[PersistedState, StateSource]:
    state = decode_from_query(query)
    if state is not None:
        return state, StateSource.QUERY
    state = decode_from_storage_blob(storage_blob)
    if state is not None:
        return state, StateSource.STORAGE
    return defaults, StateSource.DEFAULTS


def resolve_initial_state(
    query: QueryInput,
    storage_blob: Union[str, bytes, None],
    defaults: PersistedState,
) -> PersistedState:
    """Return the first complete source among query, storage and ``defaults``."""

    state, source = resolve_state_source(query, storage_blob, defaults)
    logger.info("Resolved initial state from %s", source.value)
    return state


# ---------------------------------------------------------------------------
# Store capabilities
# ---------------------------------------------------------------------------


class StateStorage(Protocol):
    def read(self) -> Optional[str]:
        ...

    def write(self, blob: str) -> bool:
        ...

    def clear(self) -> bool:
        ...


class StateLocation(Protocol):
    def read_query(self) -> str:
        ...

    def replace_query(self, query: str) -> None:
        ...

    def strip_state_params(self) -> None:
        ...


class MemoryStorage:
    """In-process storage; ``available=False`` or a ``quota`` simulate browser limits."""

    def __init__(
        self, blob: Optional[str] = None, *, available: bool = True, quota: Optional[int] = None
    ) -> None:
        self.blob = blob
        self.available = available
        self.quota = quota
        self.writes = 0

    def read(self) -> Optional[str]:
        return self.blob if self.available else None

    def write(self, blob: str) -> bool:
        self.writes += 1
        if not self.available:
            return False
        if self.quota is not None and len(blob.encode("utf-8")) > self.quota:
            return False
        self.blob = blob
        return True

    def clear(self) -> bool:
        if not self.available:
            return False
        self.blob = None
        return True


class JsonFileStorage:
    """Storage blob kept in a single file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.info("State file %s not readable: %s", self.path, exc)
            return None

    def write(self, blob: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(blob, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write state file %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove state file %s: %s", self.path, exc)
            return False
        return True


class UrlLocation:
    """A page URL whose state parameters can be rewritten in place.

    Query parameters that are not state fields are preserved.
    """

    def __init__(self, url: str = "") -> None:
        self.url = url
        self.rewrites = 0

    def read_query(self) -> str:
        return urlsplit(self.url).query

    def _foreign_params(self) -> List[Tuple[str, str]]:
        pairs = parse_qs(self.read_query(), keep_blank_values=True)
        return [
            (key, value)
            for key, values in pairs.items()
            if key not in FIELD_NAMES
            for value in values
        ]

    def _set_query(self, query: str) -> None:
        parts = urlsplit(self.url)
        self.url = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))

    def replace_query(self, query: str) -> None:
        foreign = urlencode(self._foreign_params())
        self._set_query("&".join(part for part in (query, foreign) if part))
        self.rewrites += 1

    def strip_state_params(self) -> None:
        self._set_query(urlencode(self._foreign_params()))


# ---------------------------------------------------------------------------
# Save / reset policy
# ---------------------------------------------------------------------------


class StatePersistence:
    """Writes state to storage and URL only when its serialized form changes."""

    def __init__(
        self, storage: StateStorage, location: StateLocation, defaults: PersistedState
    ) -> None:
        self.storage = storage
        self.location = location
        self.defaults = defaults
        self.last_written: Optional[str] = None

    def load(self) -> Tuple[PersistedState, StateSource]:
        state, source = resolve_state_source(
            self.location.read_query(), self.storage.read(), self.defaults
        )
        logger.info("Loaded diagram state from %s", source.value)
        return state, source

    def save(self, state: PersistedState) -> bool:
        """Persist ``state``; return ``False`` when the write was suppressed."""

        encoded = encode(state)
        if encoded.blob == self.last_written:
            logger.debug("State unchanged since last save; skipping write")
            return False

        if not self.storage.write(encoded.blob):
            logger.warning("Storage unavailable; state kept in memory and URL only")
        self.location.replace_query(encoded.query)
        self.last_written = encoded.blob
        logger.info("Saved diagram state")
        return True

    def reset(self) -> PersistedState:
        if not self.storage.clear():
            logger.warning("Could not clear stored state")
        self.location.strip_state_params()
        self.last_written = None
        logger.info("Reset diagram state to defaults")
        return self.defaults


__all__ = [
    "FIELD_NAMES",
    "PersistedState",
    "EncodedState",
    "StateSource",
    "StateDecodeError",
    "parse_query",
    "parse_storage_blob",
    "decode_from_query",
    "decode_from_storage_blob",
    "encode",
    "resolve_state_source",
    "resolve_initial_state",
    "StateStorage",
    "StateLocation",
    "MemoryStorage",
    "JsonFileStorage",
    "UrlLocation",
    "StatePersistence",
]
