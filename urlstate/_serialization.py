"""JSON encoding and decoding backed by msgspec."""

import datetime
import enum
from decimal import Decimal
from pathlib import PurePath
from typing import Any
from uuid import UUID

import msgspec

__all__ = ("JSON_LEAF_TYPES", "decode_json", "encode_json", "type_to_json")

JSON_LEAF_TYPES = (datetime.time, enum.Enum, Decimal, UUID, PurePath)
"""Leaf types written as their JSON-compatible form by :func:`type_to_json`."""


def type_to_json(value: Any) -> Any:
    """Convert a leaf value to its JSON-compatible form.

    The structural serializer applies it to :data:`JSON_LEAF_TYPES`; it is also
    the msgspec ``enc_hook`` for log records and CLI output.

    Raises:
        TypeError: The type has no JSON form.
    """
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (Decimal, UUID, PurePath)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    msg = f"Unsupported type: {type(value)!r}"
    raise TypeError(msg)


_msgspec_json_encoder = msgspec.json.Encoder(enc_hook=type_to_json)
_msgspec_json_decoder = msgspec.json.Decoder()


def encode_json(data: Any) -> str:
    """Encode data to compact JSON text.

    Args:
        data: Data to encode.

    Returns:
        JSON text.
    """
    return _msgspec_json_encoder.encode(data).decode("utf-8")


def decode_json(data: "str | bytes") -> Any:
    """Decode JSON text or bytes into Python objects.

    Args:
        data: JSON document.

    Returns:
        Decoded Python object.
    """
    return _msgspec_json_decoder.decode(data)
