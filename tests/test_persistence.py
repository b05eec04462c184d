import json
from urllib.parse import parse_qs

import pytest

from cable_statics.persistence import (
    FIELD_NAMES,
    JsonFileStorage,
    MemoryStorage,
    PersistedState,
    StateDecodeError,
    StatePersistence,
    StateSource,
    UrlLocation,
    decode_from_query,
    decode_from_storage_blob,
    encode,
    parse_query,
    resolve_initial_state,
    resolve_state_source,
)

DEFAULTS = PersistedState(0, 150, -150, 100, 150, 100, 0, -50, 50, 0)


def _sample_state(**overrides) -> PersistedState:
    values = dict(
        p0x=1.5,
        p0y=-2.0,
        p1x=0.1,
        p1y=-123.456,
        p2x=1e-7,
        p2y=99.0,
        p3x=-0.3,
        p3y=42.0,
        fm=12.25,
        fd=-450.0,
    )
    values.update(overrides)
    return PersistedState(**values)


def _query_without(name: str) -> str:
    params = parse_qs(encode(_sample_state()).query)
    params.pop(name)
    return "&".join(f"{key}={values[0]}" for key, values in params.items())


def test_query_round_trip():
    state = _sample_state()
    assert decode_from_query(encode(state).query) == state


def test_storage_round_trip():
    state = _sample_state()
    assert decode_from_storage_blob(encode(state).blob) == state


def test_encoded_query_is_canonical():
    query = encode(DEFAULTS).query

    assert query.split("&")[0] == "p0x=0"
    assert [pair.split("=")[0] for pair in query.split("&")] == list(FIELD_NAMES)
    assert "fm=50" in query


def test_decoding_ignores_field_order():
    state = _sample_state()
    pairs = encode(state).query.split("&")
    assert decode_from_query("&".join(reversed(pairs))) == state

    values = state.as_dict()
    reordered = json.dumps({name: values[name] for name in reversed(FIELD_NAMES)})
    assert decode_from_storage_blob(reordered) == state


def test_query_accepts_leading_question_mark_and_mappings():
    state = _sample_state()
    query = encode(state).query
    assert decode_from_query("?" + query) == state

    as_lists = parse_qs(query)
    assert decode_from_query(as_lists) == state
    assert decode_from_query({name: str(value) for name, value in state.as_dict().items()}) == state


@pytest.mark.parametrize("name", FIELD_NAMES)
def test_query_missing_any_field_is_rejected(name):
    assert decode_from_query(_query_without(name)) is None


@pytest.mark.parametrize("bad", ["abc", "", "inf", "nan", "1e999"])
def test_query_non_numeric_or_non_finite_is_rejected(bad):
    query = encode(_sample_state()).query.replace("fm=12.25", f"fm={bad}")
    assert decode_from_query(query) is None


def test_strict_query_parser_names_the_field():
    with pytest.raises(StateDecodeError, match="p3y"):
        parse_query(_query_without("p3y"))


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "{not json",
        "[1, 2, 3]",
        json.dumps({"p0x": 1}),
        json.dumps(dict(_sample_state().as_dict(), fd="12")),
        json.dumps(dict(_sample_state().as_dict(), fm=True)),
        json.dumps(dict(_sample_state().as_dict(), p1y=None)),
        '{"p0x":0,"p0y":0,"p1x":0,"p1y":0,"p2x":0,"p2y":0,"p3x":0,"p3y":0,"fm":NaN,"fd":0}',
        '{"p0x":0,"p0y":0,"p1x":0,"p1y":0,"p2x":0,"p2y":0,"p3x":0,"p3y":0,"fm":1' + "0" * 400 + ',"fd":0}',
    ],
)
def test_storage_blob_defects_are_rejected(raw):
    assert decode_from_storage_blob(raw) is None


def test_storage_blob_tolerates_extra_keys():
    state = _sample_state()
    blob = json.dumps(dict(state.as_dict(), theme="dark"))
    assert decode_from_storage_blob(blob) == state


def test_query_wins_over_storage():
    query_state = _sample_state()
    storage_state = _sample_state(fm=99.0)

    resolved = resolve_initial_state(
        encode(query_state).query, encode(storage_state).blob, DEFAULTS
    )

    assert resolved == query_state


def test_incomplete_query_falls_through_without_merging():
    storage_state = _sample_state(fm=99.0)

    resolved, source = resolve_state_source("p0x=999&fm=1", encode(storage_state).blob, DEFAULTS)

    assert source is StateSource.STORAGE
    assert resolved == storage_state
    assert resolved.p0x != 999


def test_defaults_when_no_source_is_valid():
    resolved, source = resolve_state_source("", "{broken", DEFAULTS)

    assert source is StateSource.DEFAULTS
    assert resolved == DEFAULTS


def test_save_twice_writes_once():
    storage = MemoryStorage()
    location = UrlLocation("https://example.org/statics")
    persistence = StatePersistence(storage, location, DEFAULTS)

    assert persistence.save(_sample_state()) is True
    assert persistence.save(_sample_state()) is False

    assert storage.writes == 1
    assert location.rewrites == 1
    assert decode_from_query(location.read_query()) == _sample_state()


def test_save_rewrites_after_a_change():
    storage = MemoryStorage()
    location = UrlLocation()
    persistence = StatePersistence(storage, location, DEFAULTS)

    persistence.save(_sample_state())
    assert persistence.save(_sample_state(fd=10.0)) is True

    assert storage.writes == 2
    assert decode_from_storage_blob(storage.blob) == _sample_state(fd=10.0)


@pytest.mark.parametrize(
    "storage",
    [MemoryStorage(available=False), MemoryStorage(quota=10)],
    ids=["disabled", "quota-exceeded"],
)
def test_storage_failure_still_updates_url(storage):
    location = UrlLocation()
    persistence = StatePersistence(storage, location, DEFAULTS)

    assert persistence.save(_sample_state()) is True

    assert storage.blob is None
    assert decode_from_query(location.read_query()) == _sample_state()
    assert persistence.save(_sample_state()) is False


def test_reset_clears_stores_and_cache():
    storage = MemoryStorage()
    location = UrlLocation("https://example.org/statics?lang=en#top")
    persistence = StatePersistence(storage, location, DEFAULTS)
    persistence.save(_sample_state())

    assert persistence.reset() == DEFAULTS

    assert storage.blob is None
    assert location.url == "https://example.org/statics?lang=en#top"
    assert persistence.last_written is None
    assert resolve_initial_state(location.read_query(), storage.read(), DEFAULTS) == DEFAULTS

    writes_before = storage.writes
    assert persistence.save(DEFAULTS) is True
    assert storage.writes == writes_before + 1


def test_reset_saves_even_when_state_matches_last_write():
    storage = MemoryStorage()
    persistence = StatePersistence(storage, UrlLocation(), DEFAULTS)
    persistence.save(DEFAULTS)

    persistence.reset()

    assert persistence.save(DEFAULTS) is True
    assert storage.writes == 2


def test_url_location_keeps_foreign_parameters():
    location = UrlLocation("https://example.org/statics?lang=en#top")

    location.replace_query(encode(DEFAULTS).query)

    assert location.url.startswith("https://example.org/statics?p0x=0&")
    assert location.url.endswith("&lang=en#top")
    assert decode_from_query(location.read_query()) == DEFAULTS


def test_json_file_storage_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested" / "state.json")
    assert storage.read() is None

    assert storage.write(encode(DEFAULTS).blob)
    assert decode_from_storage_blob(storage.read()) == DEFAULTS

    assert storage.clear()
    assert storage.read() is None
    assert storage.clear()


def test_json_file_storage_treats_undecodable_file_as_missing(tmp_path):
    path = tmp_path / "state.json"
    path.write_bytes(b"\xff\xfe{garbage")
    storage = JsonFileStorage(path)

    assert storage.read() is None
    state, source = StatePersistence(storage, UrlLocation(), DEFAULTS).load()
    assert source is StateSource.DEFAULTS
    assert state == DEFAULTS


def test_json_file_storage_reports_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = JsonFileStorage(blocker / "state.json")

    assert storage.write(encode(DEFAULTS).blob) is False


def test_oversized_integers_fall_through_to_defaults():
    huge = 10 ** 400
    blob = json.dumps(dict(_sample_state().as_dict(), fm=huge))
    mapping = {name: [str(value)] for name, value in _sample_state().as_dict().items()}
    mapping["p0x"] = huge

    assert decode_from_query(mapping) is None
    assert resolve_initial_state(mapping, blob, DEFAULTS) == DEFAULTS
