"""Structural serializer for composite URL state values.

Composite values are flattened to plain JSON and, when needed, wrapped in an
envelope that records which positions need reconstructing::

    urlstate:[refs, dates, sets, payload]

- ``refs``  - paths whose payload is the path of an object seen earlier in the
  tree (shared references and cycles).
- ``dates`` - paths whose payload is an ISO-8601 ``datetime`` or ``date``.
- ``sets``  - paths whose payload is a list that should become a ``set``.

Paths are JSON pointers (``""`` is the root, ``/filters/0`` a nested entry).
Values that need no metadata are emitted as bare JSON so lists and dicts stay
readable in the address bar.
"""

import datetime as dt
import math
import types
from dataclasses import fields
from typing import Any, Final, Union

import msgspec

from urlstate._serialization import JSON_LEAF_TYPES, decode_json, encode_json, type_to_json
from urlstate.exceptions import SerializationError
from urlstate.utils.type_guards import is_dataclass_instance, is_empty, is_msgspec_struct, is_primitive

__all__ = ("STRUCTURAL_MARKER", "deserialize", "from_text", "serialize", "to_text")

STRUCTURAL_MARKER: Final = "urlstate:"

PlainJSON = Union[None, bool, int, float, str, "list[PlainJSON]", "dict[str, PlainJSON]"]
Metadata = tuple[list[str], list[str], list[str]]


def _escape_segment(key: str) -> str:
    return key.replace("~", "~0").replace("/", "~1")


def serialize(data: Any) -> "tuple[Metadata, PlainJSON]":
    """Flatten a value into JSON-compatible data plus reconstruction metadata.

    Args:
        data: Value to flatten.

    Raises:
        SerializationError: A value in the tree cannot be represented.

    Returns:
        Tuple of ((refs, dates, sets), payload).
    """
    seen: dict[int, str] = {}
    keep_alive: list[Any] = []
    refs: list[str] = []
    dates: list[str] = []
    sets: list[str] = []

    def process(value: Any, path: str) -> PlainJSON:
        if isinstance(value, float) and not math.isfinite(value):
            msg = f"Non-finite number {value!r} at {path!r} has no JSON form"
            raise SerializationError(msg)

        if is_primitive(value):
            return value

        if is_empty(value):
            return None

        if isinstance(value, (dt.datetime, dt.date)):
            dates.append(path)
            return value.isoformat()

        if isinstance(value, JSON_LEAF_TYPES):
            return process(type_to_json(value), path)

        obj_id = id(value)
        prev_path = seen.get(obj_id)
        if prev_path is not None:
            refs.append(path)
            return prev_path
        seen[obj_id] = path
        keep_alive.append(value)

        if isinstance(value, dict):
            result_dict: dict[str, PlainJSON] = {}
            for key, entry in value.items():
                if is_empty(entry):
                    continue
                key = str(key)
                result_dict[key] = process(entry, f"{path}/{_escape_segment(key)}")
            return result_dict

        if isinstance(value, (list, tuple)):
            return [process(entry, f"{path}/{index}") for index, entry in enumerate(value)]

        if isinstance(value, (set, frozenset)):
            sets.append(path)
            return [process(entry, f"{path}/{index}") for index, entry in enumerate(value)]

        if is_msgspec_struct(value):
            return process_fields(msgspec.structs.asdict(value), path)

        if is_dataclass_instance(value):
            return process_fields({f.name: getattr(value, f.name) for f in fields(value)}, path)

        if callable(value) or isinstance(value, (type, types.ModuleType)):
            msg = f"Unsupported value in serialization: {type(value)!r}"
            raise SerializationError(msg)

        if hasattr(value, "__dict__"):
            return process_fields({k: v for k, v in vars(value).items() if not k.startswith("_")}, path)

        msg = f"Unsupported value in serialization: {type(value)!r}"
        raise SerializationError(msg)

    def process_fields(entries: dict[str, Any], path: str) -> PlainJSON:
        return {
            key: process(entry, f"{path}/{_escape_segment(key)}")
            for key, entry in entries.items()
            if not is_empty(entry)
        }

    try:
        payload = process(data, "")
    except RecursionError as e:
        msg = "Value is nested too deeply to serialize"
        raise SerializationError(msg) from e
    return (refs, dates, sets), payload


def deserialize(metadata: Metadata, data: PlainJSON) -> Any:
    """Rebuild a value from flattened data and its metadata.

    Args:
        metadata: (refs, dates, sets) path lists.
        data: JSON payload.

    Raises:
        SerializationError: The metadata does not match the payload.

    Returns:
        The reconstructed value.
    """
    refs, dates, sets_paths = metadata
    refs_set = set(refs)
    dates_set = set(dates)
    sets_set = set(sets_paths)
    objects: dict[str, Any] = {}

    def reconstruct(value: PlainJSON, path: str) -> Any:
        if path in refs_set:
            if not isinstance(value, str) or value not in objects:
                msg = f"Dangling reference at {path!r}"
                raise SerializationError(msg)
            return objects[value]

        if path in dates_set:
            if not isinstance(value, str):
                msg = f"Date payload at {path!r} must be an ISO-8601 string"
                raise SerializationError(msg)
            try:
                if "T" in value:
                    return dt.datetime.fromisoformat(value)
                return dt.date.fromisoformat(value)
            except ValueError as e:
                msg = f"Invalid date payload at {path!r}"
                raise SerializationError(msg, value) from e

        if value is None or isinstance(value, (bool, int, float, str)):
            return value

        if isinstance(value, list):
            if path in sets_set:
                result_set: set[Any] = set()
                objects[path] = result_set
                for index, entry in enumerate(value):
                    result_set.add(reconstruct(entry, f"{path}/{index}"))
                return result_set
            result_list: list[Any] = []
            objects[path] = result_list
            for index, entry in enumerate(value):
                result_list.append(reconstruct(entry, f"{path}/{index}"))
            return result_list

        if isinstance(value, dict):
            result_dict: dict[str, Any] = {}
            objects[path] = result_dict
            for key, entry in value.items():
                result_dict[key] = reconstruct(entry, f"{path}/{_escape_segment(key)}")
            return result_dict

        msg = f"Unsupported value in deserialization: {type(value)!r}"
        raise SerializationError(msg)

    try:
        return reconstruct(data, "")
    except TypeError as e:
        msg = "Unhashable entry in serialized set"
        raise SerializationError(msg) from e


def to_text(value: Any) -> str:
    """Serialize a composite value to its structural text form.

    Args:
        value: Value to serialize.

    Raises:
        SerializationError: The value cannot be represented.

    Returns:
        Bare JSON, or the ``urlstate:`` envelope when metadata is needed.
    """
    (refs, dates, sets), payload = serialize(value)
    try:
        if not (refs or dates or sets):
            return encode_json(payload)
        return STRUCTURAL_MARKER + encode_json([refs, dates, sets, payload])
    except (TypeError, ValueError, OverflowError, msgspec.EncodeError) as e:
        msg = "Could not encode value as JSON"
        raise SerializationError(msg) from e


def from_text(text: str) -> Any:
    """Parse structural text produced by :func:`to_text`.

    Args:
        text: Bare JSON or an ``urlstate:`` envelope.

    Raises:
        SerializationError: The text is not valid structural text.

    Returns:
        The reconstructed value.
    """
    if not text.startswith(STRUCTURAL_MARKER):
        try:
            return decode_json(text)
        except msgspec.DecodeError as e:
            msg = "Invalid JSON in URL state value"
            raise SerializationError(msg, text) from e

    try:
        envelope = decode_json(text[len(STRUCTURAL_MARKER) :])
    except msgspec.DecodeError as e:
        msg = "Invalid structural envelope"
        raise SerializationError(msg, text) from e
    if not isinstance(envelope, list) or len(envelope) != 4:
        msg = "Structural envelope must be a four element array"
        raise SerializationError(msg, text)
    refs, dates, sets, payload = envelope
    if not all(isinstance(paths, list) and all(isinstance(p, str) for p in paths) for paths in (refs, dates, sets)):
        msg = "Structural envelope paths must be string arrays"
        raise SerializationError(msg, text)
    return deserialize((refs, dates, sets), payload)
