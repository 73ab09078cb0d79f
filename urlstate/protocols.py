"""Runtime-checkable protocols for parameter sources."""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

__all__ = ("SupportsMultiItems",)


@runtime_checkable
class SupportsMultiItems(Protocol):
    """Protocol for ordered, possibly multi-valued parameter collections.

    Satisfied by :class:`urlstate.core.params.QueryParams` as well as the query
    parameter objects of Starlette and Litestar.
    """

    def multi_items(self) -> Iterable[tuple[str, str]]:
        """Return every ``(key, value)`` pair in source order."""
        ...
