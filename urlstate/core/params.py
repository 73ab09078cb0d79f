"""Read-only, ordered, multi-valued query parameters."""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, Optional, Union, overload
from urllib.parse import parse_qsl, urlencode

from urlstate.utils.type_guards import is_multi_items_source

__all__ = ("QueryParams", "QueryParamsInput")

QueryParamsInput = Union[
    str, bytes, "QueryParams", Mapping[str, Optional[Union[str, Sequence[str]]]], Iterable[tuple[str, str]]
]


def _pairs_from(source: Any) -> "list[tuple[str, str]]":
    if source is None:
        return []
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    if isinstance(source, str):
        return parse_qsl(source.removeprefix("?"), keep_blank_values=True)
    if is_multi_items_source(source):
        return [(str(k), str(v)) for k, v in source.multi_items()]
    if isinstance(source, Mapping):
        pairs: list[tuple[str, str]] = []
        for key, value in source.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                pairs.extend((str(key), str(item)) for item in value)
            else:
                pairs.append((str(key), str(value)))
        return pairs
    return [(str(k), str(v)) for k, v in source]


class QueryParams(Mapping[str, str]):
    """Parsed query string with consistent access patterns.

    Lookups return the first value for a key, matching the browser's
    ``URLSearchParams.get``; :meth:`getlist` and :meth:`multi_items` expose
    every value. Instances are immutable and weak-referenceable, which lets the
    extraction cache key on their identity.
    """

    __slots__ = ("__weakref__", "_dict", "_list")

    def __init__(self, source: "Optional[QueryParamsInput]" = None) -> None:
        self._list: list[tuple[str, str]] = _pairs_from(source)
        self._dict: dict[str, list[str]] = {}
        for key, value in self._list:
            self._dict.setdefault(key, []).append(value)

    @overload
    def get(self, key: str) -> Optional[str]: ...

    @overload
    def get(self, key: str, default: Any) -> Any: ...

    def get(self, key: str, default: Any = None) -> Any:
        """First value for key, or default."""
        values = self._dict.get(key)
        return values[0] if values else default

    def getlist(self, key: str) -> list[str]:
        """All values for key."""
        return list(self._dict.get(key, ()))

    def multi_items(self) -> list[tuple[str, str]]:
        """All key-value pairs in source order, duplicates included."""
        return list(self._list)

    def __getitem__(self, key: str) -> str:
        return self._dict[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, key: object) -> bool:
        return key in self._dict

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._list == other._list
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return urlencode(self._list)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"
