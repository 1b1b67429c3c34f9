"""
``chunkpipe.buffer``
====================

Fixed-capacity slot storage which tracks its own occupied length. Slots
past the occupied prefix hold ``None`` placeholders, and are never
returned as values.
"""
import copy as _copy
import typing as ty

import numpy as np

from chunkpipe import base

__all__ = ["SlotBuffer"]


T = ty.TypeVar("T")


class SlotBuffer(ty.Sized, ty.Generic[T]):
    """Buffer of ``capacity`` slots, filled front to back.

    :group: Buffer

    Parameters
    ----------
    capacity : int
        Number of slots. Fixed for the lifetime of the buffer.

    Raises
    ------
    ValueError
        If ``capacity`` is negative.

    Notes
    -----
    Only the first ``len(buffer)`` slots hold live values. ``push()``
    fills the next empty slot, ``take()`` moves every value out of a
    full buffer at once, and ``clear()`` releases the occupied prefix.
    None of the public methods read past the occupied prefix.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be a non-negative integer.")
        self._slots: base.SlotVector = np.full(capacity, None, dtype=object)
        self._num_init = 0

    def __len__(self) -> int:
        """The number of occupied slots."""
        return self._num_init

    def __getitem__(self, index: int) -> T:
        num_init = self._num_init
        if index < 0:
            index = index + num_init
        if not (0 <= index < num_init):
            raise IndexError("SlotBuffer index out of occupied range.")
        return self._slots[index]

    def __iter__(self) -> ty.Iterator[T]:
        return iter(self.view())

    def __str__(self) -> str:
        name = self.__class__.__name__
        return f"{name}(capacity={self.capacity}, len={len(self)})"

    def __repr__(self) -> str:
        return str(self)

    @property
    def capacity(self) -> int:
        """Total number of slots."""
        return len(self._slots)

    @property
    def full(self) -> bool:
        """Whether every slot is occupied. Always ``True`` for a
        zero-capacity buffer.
        """
        return self._num_init == self.capacity

    def push(self, value: T) -> None:
        """Stores ``value`` in the first empty slot.

        Raises
        ------
        IndexError
            If the buffer is already full.
        """
        if self.full:
            raise IndexError("Cannot push to a full SlotBuffer.")
        self._slots[self._num_init] = value
        self._num_init = self._num_init + 1

    def take(self) -> base.Group:
        """Moves all values out of a full buffer, leaving it empty.

        Returns
        -------
        group : tuple
            The ``capacity`` values, in the order they were pushed.

        Raises
        ------
        RuntimeError
            If any slot is unoccupied.
        """
        if not self.full:
            raise RuntimeError(
                f"Cannot take from a partially filled SlotBuffer "
                f"({len(self)} of {self.capacity} slots occupied)."
            )
        group = tuple(self._slots)
        self._slots[:] = None
        self._num_init = 0
        return group

    def view(self) -> base.Group:
        """Snapshot of the occupied prefix."""
        return tuple(self._slots[: self._num_init])

    def clear(self) -> None:
        """Releases the values in the occupied prefix."""
        self._slots[: self._num_init] = None
        self._num_init = 0

    def copy(
        self,
        deep: bool = False,
        memo: ty.Optional[ty.Dict[int, ty.Any]] = None,
    ) -> "SlotBuffer[T]":
        """Returns a buffer of the same capacity, holding copies of the
        occupied values. Empty slots are not copied.

        Parameters
        ----------
        deep : bool
            Whether to ``deepcopy`` the values, rather than shallow
            copying them. Default is ``False``.
        memo : dict, optional
            ``deepcopy`` memo, for values shared with other copied
            objects. Only used if ``deep`` is ``True``.
        """
        if memo is None:
            memo = {}
        out: "SlotBuffer[T]" = self.__class__(self.capacity)
        for value in self.view():
            if deep:
                value = _copy.deepcopy(value, memo)
            else:
                value = _copy.copy(value)
            out.push(value)
        return out
