from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Callable, Optional, Union

from typing_extensions import TypeAlias, TypeVar

from urlstate._typing import Empty, EmptyEnum, EmptyType
from urlstate.protocols import SupportsMultiItems

__all__ = (
    "Empty",
    "EmptyEnum",
    "EmptyType",
    "MappingFunc",
    "ParamSource",
    "PostProcessFunc",
    "Primitive",
    "QueryT",
    "SearchParams",
    "StateValue",
)

Primitive: TypeAlias = Union[str, int, float, bool, None]
"""Scalar values that take the codec fast paths."""

StateValue: TypeAlias = Union[
    Primitive, "list[Primitive]", "dict[str, Primitive]", datetime, date, "Mapping[str, Any]", Any
]
"""Values accepted by :func:`urlstate.core.codec.encode_value`."""

SearchParams: TypeAlias = Mapping[str, Optional[Union[str, Sequence[str]]]]
"""Plain mapping form of a parameter source."""

ParamSource: TypeAlias = Union[SupportsMultiItems, SearchParams]
"""Anything :func:`urlstate.core.extract.extract_params` accepts."""

MappingFunc: TypeAlias = Callable[[Any], Any]
PostProcessFunc: TypeAlias = Callable[[dict[str, Any]], dict[str, Any]]

QueryT = TypeVar("QueryT", bound=Mapping[str, Any], default=dict[str, Any])
