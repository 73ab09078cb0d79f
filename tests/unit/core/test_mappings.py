import pytest

from urlstate.core.builder import QueryBuilder
from urlstate.core.mappings import as_int, chain, ensure_list, limit_offset, sort_directive


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("a", ["a"]),
        (["a", "b"], ["a", "b"]),
        (("a",), ["a"]),
        (1, [1]),
        (None, [None]),
    ],
)
def test_ensure_list(value: object, expected: list) -> None:
    assert ensure_list(value) == expected


def test_ensure_list_converts_sets() -> None:
    assert sorted(ensure_list({"b", "a"})) == ["a", "b"]


def test_as_int_coerces() -> None:
    mapper = as_int()

    assert mapper("12") == 12
    assert mapper(3.0) == 3
    assert mapper(7) == 7


def test_as_int_clamps_to_minimum() -> None:
    assert as_int(minimum=1)(0) == 1
    assert as_int(minimum=1)(-5) == 1
    assert as_int(minimum=1)(4) == 4


@pytest.mark.parametrize(("value", "error"), [(True, TypeError), (2.5, ValueError), ("abc", ValueError)])
def test_as_int_rejects(value: object, error: type) -> None:
    with pytest.raises(error):
        as_int()(value)


def test_sort_directive() -> None:
    post = sort_directive()

    assert post({"orderBy": "name", "orderDir": "+"}) == {"orderBy": "name", "orderDir": "+", "sort": "+name"}
    assert post({"orderBy": "name"}) == {"orderBy": "name"}


def test_sort_directive_custom_keys() -> None:
    post = sort_directive("by", "dir", "ordering")

    assert post({"by": "age", "dir": "-"})["ordering"] == "-age"


def test_limit_offset() -> None:
    post = limit_offset()

    assert post({"page": 3, "pageSize": 20}) == {"page": 3, "pageSize": 20, "limit": 20, "offset": 40}
    assert post({"page": 0, "pageSize": 20})["offset"] == 0


def test_chain_applies_left_to_right() -> None:
    post = chain(lambda r: {**r, "x": 1}, lambda r: {**r, "x": r["x"] + 1})

    assert post({}) == {"x": 2}


def test_builder_with_ready_made_functions() -> None:
    builder = (
        QueryBuilder()
        .add_mapping("page", as_int(minimum=1))
        .add_mapping("roles", ensure_list)
        .set_post_process(chain(sort_directive(), limit_offset()))
    )

    result = builder.build({"page": 0, "roles": "admin", "orderBy": "name", "orderDir": "-"})

    assert result == {
        "page": 1,
        "pageSize": 10,
        "roles": ["admin"],
        "orderBy": "name",
        "orderDir": "-",
        "sort": "-name",
        "limit": 10,
        "offset": 0,
    }
