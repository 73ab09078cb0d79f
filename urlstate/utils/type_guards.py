"""Type guard functions for runtime type checking in urlstate.

These narrow types for the type checker where the codec and navigation
helpers branch on the shape of a value.
"""

from collections.abc import Mapping
from collections.abc import Set as AbstractSet
from dataclasses import is_dataclass
from typing import Any

from msgspec import Struct
from typing_extensions import TypeGuard

from urlstate._typing import EmptyEnum
from urlstate.protocols import SupportsMultiItems

__all__ = (
    "is_dataclass_instance",
    "is_empty",
    "is_empty_collection",
    "is_msgspec_struct",
    "is_multi_items_source",
    "is_primitive",
)


def is_empty(obj: Any) -> "TypeGuard[EmptyEnum]":
    """Check if a value is the ``Empty`` sentinel.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return obj is EmptyEnum.EMPTY


def is_primitive(obj: Any) -> "TypeGuard[str | int | float | bool | None]":
    """Check if a value takes the codec's primitive fast path."""
    return obj is None or isinstance(obj, (str, int, float, bool))


def is_dataclass_instance(obj: Any) -> bool:
    """Check if an object is a dataclass instance (not the class itself).

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return is_dataclass(obj) and not isinstance(obj, type)


def is_msgspec_struct(obj: Any) -> "TypeGuard[Struct]":
    """Check if a value is a msgspec ``Struct`` instance."""
    return isinstance(obj, Struct)


def is_multi_items_source(obj: Any) -> "TypeGuard[SupportsMultiItems]":
    """Check if a parameter source exposes ordered ``multi_items()`` pairs.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, SupportsMultiItems)


def is_empty_collection(obj: Any) -> bool:
    """Check if a value is a list, tuple, set or mapping with no entries."""
    if isinstance(obj, (list, tuple, AbstractSet, Mapping)):
        return len(obj) == 0
    return False
