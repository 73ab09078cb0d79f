"""URL value codec.

Primitives are stringified and percent-escaped directly. Everything else goes
through the structural serializer and is escaped as one opaque token. Both
directions consult the process-wide caches and never raise: malformed input
degrades to its literal text and a warning is logged.
"""

import math
from typing import Any, Final, Optional, Union
from urllib.parse import quote, unquote

from urlstate._serialization import JSON_LEAF_TYPES, type_to_json
from urlstate._typing import Empty
from urlstate.core.cache import get_cache_config, get_decode_cache, get_encode_cache
from urlstate.core.serialization import STRUCTURAL_MARKER, from_text, to_text
from urlstate.exceptions import SerializationError
from urlstate.typing import StateValue
from urlstate.utils.logging import get_logger

__all__ = ("decode_value", "encode_value", "escape", "unescape")

logger = get_logger("urlstate.codec")

# Characters left untouched by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE: Final = "-_.!~*'()"

_LITERALS: Final[dict[str, Any]] = {"true": True, "false": False, "null": None, "undefined": Empty}


def escape(text: str) -> str:
    """Percent-escape text with ``encodeURIComponent`` semantics."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def unescape(text: str) -> str:
    """Reverse :func:`escape`.

    Raises:
        UnicodeDecodeError: Escapes do not form valid UTF-8.
    """
    return unquote(text, errors="strict")


def _parse_number(text: str) -> Optional[Union[int, float]]:
    """Parse text that is the canonical spelling of a finite number."""
    try:
        number: Union[int, float] = int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
    if str(number) != text:
        return None
    return number


def encode_value(value: StateValue) -> str:
    """Encode a state value to URL-safe text.

    Composite results are cached by object identity. A value must not be
    mutated after it has been encoded: encoding the same object again returns
    the cached text until :func:`~urlstate.core.cache.clear_url_state_caches`
    is called. Encode a fresh object, or a copy, for each new state.

    Args:
        value: Primitive, date, or composite value. ``None`` and ``Empty`` mean absent.

    Returns:
        Escaped text; the empty string for absent values.
    """
    if isinstance(value, str):
        return escape(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return escape(str(value))
    if value is None or value is Empty:
        return ""
    if isinstance(value, JSON_LEAF_TYPES):
        return encode_value(type_to_json(value))

    config = get_cache_config()
    cache = get_encode_cache() if config.enabled else None
    if cache is not None:
        cached = cache.get(value)
        if cached is not None:
            return cached

    try:
        encoded = escape(to_text(value))
    except SerializationError as e:
        logger.warning(
            "Serialization failed, falling back to str(): %s",
            e,
            extra={"extra_fields": {"value_type": type(value).__name__}},
        )
        return escape(str(value))

    if cache is not None:
        cache.put(value, encoded)
    return encoded


def decode_value(value: Any) -> Any:
    """Decode URL text produced by :func:`encode_value`.

    Non-string input is assumed to be decoded already and is returned as is.

    Args:
        value: Escaped text from a query parameter.

    Returns:
        The typed value, or the unescaped text when it cannot be decoded.
    """
    if not isinstance(value, str) or not value:
        return value

    config = get_cache_config()
    cache = get_decode_cache() if config.enabled else None
    if cache is not None:
        hit, cached = cache.lookup(value)
        if hit:
            return cached

    try:
        decoded = _decode_text(unescape(value))
    except (SerializationError, UnicodeDecodeError) as e:
        logger.warning(
            "Deserialization failed, returning raw text: %s",
            e,
            extra={"extra_fields": {"value_length": len(value)}},
        )
        return unquote(value)

    if cache is not None:
        cache.put(value, decoded)
    return decoded


def _decode_text(text: str) -> Any:
    if text in _LITERALS:
        return _LITERALS[text]

    number = _parse_number(text)
    if number is not None:
        return number

    if not text.startswith(("[", "{")) and STRUCTURAL_MARKER not in text:
        return text

    return from_text(text)
