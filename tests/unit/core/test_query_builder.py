from typing import Any

import pytest

from urlstate.core.builder import (
    DEFAULT_QUERY_DEFAULTS,
    QueryBuilder,
    QueryBuilderConfig,
    build_query,
    get_query_from_url,
    query_builder,
)
from urlstate.core.mappings import ensure_list
from urlstate.core.params import QueryParams
from urlstate.exceptions import ImproperConfigurationError
from urlstate.typing import Empty


def test_default_builder_seeds_paging() -> None:
    assert query_builder({}) == {"page": 1, "pageSize": 10}
    assert dict(DEFAULT_QUERY_DEFAULTS) == {"page": 1, "pageSize": 10}


def test_params_override_defaults() -> None:
    assert query_builder({"page": 3, "search": "x"}) == {"page": 3, "pageSize": 10, "search": "x"}


def test_empty_values_are_skipped() -> None:
    assert query_builder({"page": Empty, "search": None}) == {"page": 1, "pageSize": 10, "search": None}


def test_set_defaults_merges_per_key() -> None:
    builder = QueryBuilder().set_defaults({"pageSize": 25}).set_defaults(sort="name")

    assert builder.build({}) == {"page": 1, "pageSize": 25, "sort": "name"}


def test_set_defaults_later_call_wins() -> None:
    builder = QueryBuilder().set_defaults(pageSize=25).set_defaults(pageSize=50)

    assert builder.build({})["pageSize"] == 50


def test_ignore_takes_precedence_over_mapping() -> None:
    calls: list[Any] = []

    def record(value: Any) -> Any:
        calls.append(value)
        return value

    builder = QueryBuilder().add_mapping("debug", record).ignore("debug", "trace")

    assert builder.build({"debug": True, "trace": 1, "page": 2}) == {"page": 2, "pageSize": 10}
    assert calls == []


def test_ignore_does_not_remove_defaults() -> None:
    assert QueryBuilder().ignore("page").build({"page": 5}) == {"page": 1, "pageSize": 10}


def test_mapping_replaces_earlier_mapping() -> None:
    builder = QueryBuilder().add_mapping("q", str.upper).add_mapping("q", str.lower)

    assert builder.build({"q": "MiXeD"})["q"] == "mixed"


def test_mapping_only_runs_for_present_keys() -> None:
    builder = QueryBuilder().add_mapping("roles", ensure_list)

    assert builder.build({"roles": "admin"})["roles"] == ["admin"]
    assert "roles" not in builder.build({})


def test_post_process_runs_last_and_once() -> None:
    seen: list[dict[str, Any]] = []

    def post(result: dict[str, Any]) -> dict[str, Any]:
        seen.append(dict(result))
        return {**result, "done": True}

    builder = QueryBuilder().add_mapping("page", lambda v: v * 10).set_post_process(post)

    assert builder.build({"page": 2}) == {"page": 20, "pageSize": 10, "done": True}
    assert seen == [{"page": 20, "pageSize": 10}]


def test_set_post_process_none_clears() -> None:
    builder = QueryBuilder().set_post_process(lambda r: {}).set_post_process(None)

    assert builder.build({}) == {"page": 1, "pageSize": 10}


def test_builds_do_not_share_state() -> None:
    builder = QueryBuilder()

    first = builder.build({"search": "a"})
    first["page"] = 100
    second = builder.build({})

    assert second == {"page": 1, "pageSize": 10}


def test_params_are_not_mutated() -> None:
    params = {"page": 2, "debug": True}

    QueryBuilder().ignore("debug").build(params)

    assert params == {"page": 2, "debug": True}


def test_mapping_errors_propagate() -> None:
    def boom(value: Any) -> Any:
        raise ValueError("bad value")

    with pytest.raises(ValueError, match="bad value"):
        QueryBuilder().add_mapping("page", boom).build({"page": 1})


def test_constructor_keywords() -> None:
    builder: QueryBuilder[dict[str, Any]] = QueryBuilder(
        defaults={"pageSize": 5},
        ignored=["debug"],
        mappings={"tags": ensure_list},
        post_process=lambda r: {**r, "built": True},
    )

    assert builder.build({"tags": "x", "debug": 1}) == {"page": 1, "pageSize": 5, "tags": ["x"], "built": True}


def test_constructor_merges_config() -> None:
    config = QueryBuilderConfig(defaults={"pageSize": 20}, ignored=frozenset({"a"}))
    builder = QueryBuilder(config, ignored=["b"])

    assert builder.config.ignored == frozenset({"a", "b"})
    assert builder.build({"a": 1, "b": 2, "c": 3}) == {"page": 1, "pageSize": 20, "c": 3}


def test_config_rejects_non_callables() -> None:
    with pytest.raises(ImproperConfigurationError):
        QueryBuilderConfig(mappings={"page": 5})  # type: ignore[dict-item]
    with pytest.raises(ImproperConfigurationError):
        QueryBuilder().set_post_process("nope")  # type: ignore[arg-type]


def test_build_query_without_config() -> None:
    assert build_query({"page": 4}) == {"page": 4, "pageSize": 10}


def test_from_url_with_prefix() -> None:
    params = QueryParams("users_page=2&users_search=john&orders_page=5")

    assert QueryBuilder().from_url(params, "users_") == {"page": 2, "pageSize": 10, "search": "john"}


def test_get_query_from_url_defaults() -> None:
    params = QueryParams("page=3&active=true")

    assert get_query_from_url(params) == {"page": 3, "pageSize": 10, "active": True}


def test_get_query_from_url_with_builder() -> None:
    builder = QueryBuilder().ignore("active")

    assert get_query_from_url(QueryParams("active=true"), builder=builder) == {"page": 1, "pageSize": 10}


def test_repr() -> None:
    builder = QueryBuilder().ignore("b", "a").add_mapping("x", ensure_list)

    assert repr(builder) == (
        "QueryBuilder(defaults={'page': 1, 'pageSize': 10}, ignored=['a', 'b'], mappings=['x'], post_process=False)"
    )


def test_mutating_built_query_does_not_leak_into_later_builds() -> None:
    builder = QueryBuilder().add_mapping("roles", ensure_list)
    url = "roles=%5B%22admin%22%5D"

    first = builder.from_url(QueryParams(url))
    first["roles"].append("intruder")

    assert builder.from_url(QueryParams(url))["roles"] == ["admin"]
