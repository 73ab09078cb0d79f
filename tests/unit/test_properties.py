import datetime
from typing import Any

import pytest

from urlstate import (
    CacheConfig,
    Empty,
    QueryBuilder,
    QueryParams,
    apply_updates,
    clear_url_state_caches,
    decode_value,
    encode_value,
    extract_params,
    query_builder,
    update_cache_config,
)


def _cyclic() -> "dict[str, Any]":
    node: dict[str, Any] = {"id": 1, "children": []}
    node["children"].append({"id": 2, "parent": node})
    return node


ROUND_TRIP_VALUES = [
    "",
    "plain",
    "with spaces & symbols/?#=%",
    "unicode ✓ café",
    "007",
    "true story",
    0,
    -12,
    3.25,
    1e-07,
    True,
    False,
    ["a", "b", "c"],
    [1, None, True, "x"],
    [],
    {},
    {"filters": {"status": ["open"], "range": {"min": 1, "max": 5}}},
    datetime.date(2024, 1, 31),
    datetime.datetime(2024, 1, 31, 8, 15, 0),
    {"when": datetime.datetime(2023, 12, 1, 0, 0)},
    {"tags": {"red", "blue"}},
]


@pytest.mark.parametrize("value", ROUND_TRIP_VALUES)
def test_round_trip(value: Any) -> None:
    assert decode_value(encode_value(value)) == value


def test_round_trip_shared_reference() -> None:
    shared = ["x"]
    result = decode_value(encode_value({"a": shared, "b": shared}))

    assert result == {"a": ["x"], "b": ["x"]}
    assert result["a"] is result["b"]


def test_round_trip_cycle() -> None:
    result = decode_value(encode_value(_cyclic()))

    assert result["children"][0]["parent"] is result
    assert result["children"][0]["id"] == 2


@pytest.mark.parametrize("value", [None, Empty])
def test_absent_values_encode_to_empty_string(value: Any) -> None:
    assert encode_value(value) == ""


@pytest.mark.parametrize("value", ROUND_TRIP_VALUES[1:])
def test_decode_is_idempotent(value: Any) -> None:
    decoded = decode_value(encode_value(value))

    assert decode_value(decoded) == decoded


@pytest.mark.parametrize("value", ["", [], {}, False, None])
def test_removal_policy(value: Any) -> None:
    result = apply_updates(QueryParams("key=1&other=2"), {"key": value})

    assert "key" not in result.params
    assert result.params.multi_items() == [("other", "2")]


def test_ignore_precedence_and_defaults_survive() -> None:
    builder = QueryBuilder().add_mapping("page", lambda v: v * 100).ignore("page")

    assert builder.build({"page": 7}) == {"page": 1, "pageSize": 10}


def test_defaults_and_override() -> None:
    assert query_builder({}) == {"page": 1, "pageSize": 10}
    assert query_builder({"page": 3}) == {"page": 3, "pageSize": 10}


def test_prefix_extraction() -> None:
    source = {"u_search": "john", "i_search": "bug"}

    assert extract_params(source, "u_") == {"search": "john"}


def test_post_process_sees_defaulted_and_mapped_result() -> None:
    builder = (
        QueryBuilder()
        .set_defaults(orderDir="+")
        .set_post_process(lambda r: {**r, "sort": r["orderDir"] + r["orderBy"]})
    )

    assert builder.build({"orderBy": "name"})["sort"] == "+name"


def test_cache_transparency() -> None:
    params = QueryParams(
        [
            ("page", encode_value(2)),
            ("filters", encode_value({"status": ["open"], "since": datetime.date(2024, 1, 1)})),
            ("q", encode_value("a b")),
        ]
    )
    builder = QueryBuilder().ignore("q")

    cached = [builder.from_url(params) for _ in range(3)]
    clear_url_state_caches()
    cleared = builder.from_url(params)
    update_cache_config(CacheConfig(enabled=False))
    uncached = builder.from_url(params)

    assert cached[0] == cached[1] == cached[2] == cleared == uncached
    assert uncached == {
        "page": 2,
        "pageSize": 10,
        "filters": {"status": ["open"], "since": datetime.date(2024, 1, 1)},
    }
