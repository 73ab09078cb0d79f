"""Parameter extraction: filter a parameter source by prefix and decode its values."""

from collections.abc import Mapping
from typing import Any

from urlstate.core.cache import get_cache_config, get_source_cache
from urlstate.core.codec import decode_value
from urlstate.core.params import QueryParams
from urlstate.typing import ParamSource
from urlstate.utils.logging import param_context
from urlstate.utils.type_guards import is_empty, is_multi_items_source

__all__ = ("extract_params", "iter_source_pairs")


def iter_source_pairs(source: ParamSource) -> "list[tuple[str, Any]]":
    """Return the ``(key, raw value)`` pairs of a parameter source in order.

    Sources exposing ``multi_items()`` contribute every pair. Plain mappings
    contribute the first element of list values and skip absent values.

    Args:
        source: Multi-valued parameter collection or plain mapping.

    Raises:
        TypeError: The source is a string or not a supported collection.

    Returns:
        Ordered list of pairs.
    """
    if isinstance(source, (str, bytes)):
        msg = "extract_params() expects a parameter collection; decode single values with decode_value()"
        raise TypeError(msg)
    if is_multi_items_source(source):
        return list(source.multi_items())
    if isinstance(source, Mapping):
        pairs: list[tuple[str, Any]] = []
        for key, value in source.items():
            if value is None or is_empty(value):
                continue
            if isinstance(value, (list, tuple)):
                if not value:
                    continue
                value = value[0]
            pairs.append((key, value))
        return pairs
    msg = f"Unsupported parameter source: {type(source)!r}"
    raise TypeError(msg)


def extract_params(source: ParamSource, prefix: str = "") -> "dict[str, Any]":
    """Decode the parameters of a source, optionally scoped to a key prefix.

    With a prefix only matching keys are kept and the prefix is stripped from
    them; when two keys collide after stripping the later one wins. Without a
    prefix, results for :class:`QueryParams` sources are memoized by source
    identity.

    Args:
        source: Multi-valued parameter collection or plain mapping.
        prefix: Namespace prefix separating independent states in one URL.

    Returns:
        Mapping of (stripped) keys to decoded values.
    """
    memoize = not prefix and isinstance(source, QueryParams) and get_cache_config().enabled
    if memoize:
        cached = get_source_cache().get(source)
        if cached is not None:
            return cached

    result: dict[str, Any] = {}
    prefix_length = len(prefix)
    for key, value in iter_source_pairs(source):
        if prefix and not key.startswith(prefix):
            continue
        with param_context(key):
            result[key[prefix_length:] if prefix else key] = decode_value(value)

    if memoize:
        get_source_cache().put(source, result)
    return result
