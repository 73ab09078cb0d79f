from enum import Enum
from typing import Final, Literal, Union

from msgspec import UnsetType

__all__ = ("Empty", "EmptyEnum", "EmptyType")


class EmptyEnum(Enum):
    """A sentinel enum used as placeholder for absent values."""

    EMPTY = 0

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


EmptyType = Union[Literal[EmptyEnum.EMPTY], UnsetType]
Empty: Final = EmptyEnum.EMPTY
