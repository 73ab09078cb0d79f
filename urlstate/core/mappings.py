"""Ready-made mapping and post-process functions for :class:`QueryBuilder`."""

from collections.abc import Set as AbstractSet
from typing import Any, Callable, Optional

from urlstate.typing import MappingFunc, PostProcessFunc

__all__ = ("as_int", "chain", "ensure_list", "limit_offset", "sort_directive")


def ensure_list(value: Any) -> "list[Any]":
    """Wrap a single value in a list; lists pass through, tuples and sets are converted."""
    if isinstance(value, list):
        return value
    if isinstance(value, (tuple, AbstractSet)):
        return list(value)
    return [value]


def as_int(minimum: Optional[int] = None) -> MappingFunc:
    """Create a mapping that coerces values to ``int``.

    Args:
        minimum: Lower bound; smaller values are clamped to it.

    Returns:
        A mapping function. It raises ``ValueError`` or ``TypeError`` for values
        that are not integral, which propagates out of ``build``.
    """

    def mapper(value: Any) -> int:
        if isinstance(value, bool):
            msg = f"Expected an integer, got {value!r}"
            raise TypeError(msg)
        if isinstance(value, float) and not value.is_integer():
            msg = f"Expected an integer, got {value!r}"
            raise ValueError(msg)
        number = int(value)
        if minimum is not None and number < minimum:
            return minimum
        return number

    return mapper


def sort_directive(
    field_key: str = "orderBy", direction_key: str = "orderDir", target: str = "sort"
) -> PostProcessFunc:
    """Create a post-process composing a sort directive such as ``"+name"``.

    The directive is ``direction + field`` and is only set when both keys are
    present in the result.
    """

    def post_process(result: "dict[str, Any]") -> "dict[str, Any]":
        field_name = result.get(field_key)
        direction = result.get(direction_key)
        if field_name is None or direction is None:
            return result
        return {**result, target: f"{direction}{field_name}"}

    return post_process


def limit_offset(page_key: str = "page", size_key: str = "pageSize") -> PostProcessFunc:
    """Create a post-process adding ``limit`` and ``offset`` for limit/offset backends.

    ``offset`` is ``(page - 1) * size``, with pages counted from 1.
    """

    def post_process(result: "dict[str, Any]") -> "dict[str, Any]":
        page = int(result[page_key])
        size = int(result[size_key])
        return {**result, "limit": size, "offset": max(page - 1, 0) * size}

    return post_process


def chain(*post_processes: "Callable[[dict[str, Any]], dict[str, Any]]") -> PostProcessFunc:
    """Compose post-processes, applied left to right."""

    def post_process(result: "dict[str, Any]") -> "dict[str, Any]":
        for func in post_processes:
            result = func(result)
        return result

    return post_process
