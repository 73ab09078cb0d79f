"""Compute the next location for a URL state update.

These are the pure parts of a navigation integration: decide which keys to
write or remove, produce the new parameters, and render the location. Pushing
the location to a router or browser history is left to the caller.
"""

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from urlstate._typing import Empty
from urlstate.core.codec import encode_value
from urlstate.core.extract import extract_params
from urlstate.core.params import QueryParams, QueryParamsInput
from urlstate.typing import StateValue
from urlstate.utils.type_guards import is_empty, is_empty_collection

__all__ = (
    "UpdateResult",
    "apply_updates",
    "build_location",
    "delete_all_items",
    "delete_items",
    "should_remove_param",
)


class UpdateResult(NamedTuple):
    """New parameters plus whether anything differs from the source."""

    params: QueryParams
    changed: bool


def should_remove_param(value: Any) -> bool:
    """Check whether writing ``value`` should remove its key instead.

    Args:
        value: Pending state value.

    Returns:
        True for ``""``, ``None``, ``Empty``, ``False`` and empty collections.
    """
    if value is None or is_empty(value) or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    return is_empty_collection(value)


def apply_updates(source: "QueryParamsInput", updates: "Mapping[str, StateValue]", prefix: str = "") -> UpdateResult:
    """Apply a batch of state updates to a copy of the parameters.

    Removal values delete every occurrence of the key. Other values are encoded
    and written only if they differ from the current first value; an existing
    key is replaced in place and later duplicates are dropped, a new key is
    appended.

    Args:
        source: Current parameters.
        updates: State keys (without prefix) mapped to new values.
        prefix: Namespace prefix of the state being updated.

    Returns:
        The new parameters and whether they changed.
    """
    current = source if isinstance(source, QueryParams) else QueryParams(source)
    if not updates:
        return UpdateResult(current, False)

    pairs = current.multi_items()
    changed = False
    for key, value in updates.items():
        param_key = prefix + key
        current_value = next((v for k, v in pairs if k == param_key), None)

        if should_remove_param(value):
            if current_value is not None:
                pairs = [(k, v) for k, v in pairs if k != param_key]
                changed = True
            continue

        encoded = encode_value(value)
        if current_value == encoded:
            continue
        changed = True
        if current_value is None:
            pairs.append((param_key, encoded))
            continue
        replaced: list[tuple[str, str]] = []
        written = False
        for k, v in pairs:
            if k != param_key:
                replaced.append((k, v))
            elif not written:
                replaced.append((k, encoded))
                written = True
        pairs = replaced

    if not changed:
        return UpdateResult(current, False)
    return UpdateResult(QueryParams(pairs), True)


def delete_items(source: "QueryParamsInput", keys: "Iterable[str]", prefix: str = "") -> UpdateResult:
    """Remove state keys from the parameters."""
    return apply_updates(source, dict.fromkeys(keys, Empty), prefix)


def delete_all_items(source: "QueryParamsInput", prefix: str = "") -> UpdateResult:
    """Remove every key belonging to the state under ``prefix``.

    With an empty prefix every parameter in the source is removed. A client
    hook with no state key treats this as a no-op instead; callers sharing the
    URL with other state should always pass a prefix.
    """
    current = source if isinstance(source, QueryParams) else QueryParams(source)
    return delete_items(current, extract_params(current, prefix), prefix)


def build_location(pathname: str, params: QueryParams) -> str:
    """Render ``pathname`` with the parameters as its query string."""
    search = str(params)
    return f"{pathname}?{search}" if search else pathname
