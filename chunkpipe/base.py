from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Tuple, Optional, Any
from collections.abc import Iterator

import numpy.typing as npt


__all__ = [
    "SizeHint",
    "Group",
    "SlotVector",
    "ChunkAdapter",
]


T = TypeVar("T")
Self = TypeVar("Self")
SizeHint = Tuple[int, Optional[int]]
Group = Tuple[T, ...]
SlotVector = npt.NDArray[Any]


class ChunkAdapter(ABC, Iterator, Generic[T]):
    """Adapter pattern interface for iterators regrouping their source
    into fixed-size groups.
    """

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of elements in each emitted group."""

    @property
    @abstractmethod
    def remainder(self) -> Tuple[T, ...]:
        """Elements pulled from the source which have not yet been
        emitted in a group.
        """

    @abstractmethod
    def size_hint(self) -> SizeHint:
        """Lower and optional upper bound on the remaining groups."""

    @abstractmethod
    def close(self) -> None:
        """Releases the buffered elements and the source."""

    @abstractmethod
    def copy(self: Self) -> Self:
        """Returns an independent copy of the adapter."""
