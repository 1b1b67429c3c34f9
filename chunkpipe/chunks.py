"""
``chunkpipe.chunks``
====================

The ChunkPipe chunks module provides an iterator adapter which regroups
any source iterator into tuples of a fixed number of consecutive items,
keeping the items left over at the end of the source available for
inspection.
"""
import copy as _copy
import sys
import typing as ty

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from chunkpipe import base, sources
from chunkpipe.buffer import SlotBuffer

__all__ = ["ArrayChunks", "array_chunks", "chunked"]


T = ty.TypeVar("T")


class ArrayChunks(base.ChunkAdapter[T]):
    """Iterator over successive groups of ``size`` items drawn from
    ``source``, each emitted as a tuple.

    :group: Chunks

    Parameters
    ----------
    source : Iterable
        Items to regroup. ``iter()`` is called on it, and the resulting
        iterator is owned by the adapter from then on.
    size : int
        Number of items in each group. Fixed for the lifetime of the
        adapter.

    Attributes
    ----------
    size : int
        Number of items in each group.
    num_init : int
        Number of items currently held in the buffer.
    remainder : tuple
        Items drawn from the source which do not yet fill a group.

    Raises
    ------
    TypeError
        If ``size`` is not an integer, or ``source`` is not iterable.
    ValueError
        If ``size`` is negative.

    Notes
    -----
    Iteration stops as soon as the source raises ``StopIteration``. The
    items drawn up to that point are kept in the buffer, and a later
    call to ``next()`` carries on filling it, so sources which yield
    again after reporting exhaustion lose no items.

    If ``size`` is zero, every call to ``next()`` returns an empty tuple
    without consulting the source, and the iterator never stops.

    If the source raises any exception other than ``StopIteration``,
    the exception propagates to the caller. The buffer keeps the items
    drawn before the fault, and the adapter may still be iterated or
    closed.
    """

    def __init__(self, source: ty.Iterable[T], size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int):
            raise TypeError(
                f"size must be an integer, not {type(size).__name__}."
            )
        if size < 0:
            raise ValueError("size must be a non-negative integer.")
        self._source: ty.Optional[ty.Iterator[T]] = iter(source)
        self._buffer: SlotBuffer[T] = SlotBuffer(size)

    def __rich__(self) -> Tree:
        name = self.__class__.__name__
        tree = Tree(
            f"{name}(size=[yellow]{self.size}[default], "
            f"num_init=[yellow]{self.num_init}[default])"
        )
        if self._source is None:
            source_repr = "[red]<closed>"
        else:
            source_repr = f"[green]{escape(repr(self._source))}"
        tree.add(f"[blue]source [default]= {source_repr}")
        buf_tree = tree.add("[blue]buffer")
        for idx, value in enumerate(self._buffer):
            value_repr = escape(repr(value))
            buf_tree.add(f"[red]{idx} [default]= [green]{value_repr}")
        for idx in range(self.num_init, self.size):
            buf_tree.add(f"[red]{idx} [default]= <empty>")
        return tree

    def __repr__(self) -> str:
        console = Console(color_system=None)
        with console.capture() as capture:
            console.print(self)
        return capture.get()

    def __iter__(self) -> "ArrayChunks[T]":
        return self

    def __next__(self) -> base.Group:
        source = self._source
        if source is None:
            raise RuntimeError("ArrayChunks adapter has been closed.")
        buffer = self._buffer
        while not buffer.full:
            buffer.push(next(source))
        return buffer.take()

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def __enter__(self) -> "ArrayChunks[T]":
        return self

    def __exit__(self, *exc: ty.Any) -> None:
        self.close()

    def __copy__(self) -> "ArrayChunks[T]":
        return self.copy()

    def __deepcopy__(self, memo: ty.Dict[int, ty.Any]) -> "ArrayChunks[T]":
        return self.copy(deep=True, memo=memo)

    @property
    def size(self) -> int:
        """Number of items in each group."""
        return self._buffer.capacity

    @property
    def num_init(self) -> int:
        """Number of items held in the buffer, awaiting a full group."""
        return len(self._buffer)

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has released the source."""
        return self._source is None

    @property
    def remainder(self) -> base.Group:
        """Items drawn from the source which did not fill a group.

        Once the adapter is exhausted, these are the items left over at
        the end of the source. Immediately after a group is emitted, or
        before iteration starts, it is an empty tuple.
        """
        return self._buffer.view()

    def size_hint(self) -> base.SizeHint:
        """Returns bounds on the number of groups left to emit.

        Returns
        -------
        lower : int
            Minimum number of groups remaining. Saturates at
            ``sys.maxsize``.
        upper : int, optional
            Maximum number of groups remaining, or ``None`` if the
            source does not bound its length, or the bound would exceed
            ``sys.maxsize``.
        """
        if self.size == 0:
            return sys.maxsize, None
        if self._source is None:
            return 0, 0
        min_items, max_items = sources.size_hint(self._source)
        num_init = self.num_init
        min_chunks = min(min_items + num_init, sys.maxsize) // self.size
        max_chunks = None
        if max_items is not None and max_items + num_init <= sys.maxsize:
            max_chunks = (max_items + num_init) // self.size
        return min_chunks, max_chunks

    def copy(
        self,
        deep: bool = False,
        memo: ty.Optional[ty.Dict[int, ty.Any]] = None,
    ) -> "ArrayChunks[T]":
        """Returns an independent adapter, with a copy of the source and
        copies of the buffered items.

        Parameters
        ----------
        deep : bool
            Whether to ``deepcopy`` the source and buffered items,
            rather than shallow copying them. Default is ``False``.
        memo : dict, optional
            ``deepcopy`` memo shared by the source and the buffered
            items, so objects referenced by both are copied once.

        Raises
        ------
        TypeError
            If the source iterator cannot be copied.
        RuntimeError
            If the adapter has been closed.
        """
        if self._source is None:
            raise RuntimeError("Cannot copy a closed ArrayChunks adapter.")
        if memo is None:
            memo = {}
        try:
            if deep:
                source_copy = _copy.deepcopy(self._source, memo)
            else:
                source_copy = _copy.copy(self._source)
        except TypeError as e:
            raise TypeError(
                f"Source of type {type(self._source).__name__} cannot be "
                "copied, so neither can the adapter wrapping it."
            ) from e
        out = self.__class__.__new__(self.__class__)
        out._source = source_copy
        out._buffer = self._buffer.copy(deep=deep, memo=memo)
        return out

    def close(self) -> None:
        """Releases the buffered items, then the source. Calls the
        source's ``close()`` method, if it has one. Safe to call more
        than once.
        """
        self._buffer.clear()
        source, self._source = self._source, None
        close_source = getattr(source, "close", None)
        if callable(close_source):
            close_source()


def array_chunks(source: ty.Iterable[T], size: int) -> ArrayChunks[T]:
    """Returns an iterator of tuples, each containing ``size``
    consecutive items from ``source``.

    :group: Chunks

    Parameters
    ----------
    source : Iterable
        Items to regroup.
    size : int
        Number of items per group.

    Returns
    -------
    chunks : ArrayChunks
        Adapter over ``source``. Items left over once the source is
        exhausted are available from ``chunks.remainder``.
    """
    return ArrayChunks(source, size)


def chunked(
    source: ty.Iterable[T], size: int, strict: bool = False
) -> ty.Generator[base.Group, None, None]:
    """Generator of tuples containing ``size`` consecutive items from
    ``source``, followed by the left over items, if any.

    :group: Chunks

    Parameters
    ----------
    source : Iterable
        Items to regroup.
    size : int
        Number of items per group. Must be positive.
    strict : bool
        If ``True``, raise instead of yielding a final group shorter
        than ``size``. Default is ``False``.

    Yields
    ------
    group : tuple
        Groups of ``size`` items. The last group may be shorter, unless
        ``strict`` is set.

    Raises
    ------
    ValueError
        If ``size`` is less than 1, raised when ``chunked`` is called.
        If ``strict`` is ``True`` and the number of items in ``source``
        is not a multiple of ``size``, raised once the source ends.
    """
    if size < 1:
        raise ValueError("size must be at least 1.")
    return _chunked(ArrayChunks(source, size), strict)


def _chunked(
    chunks: ArrayChunks[T], strict: bool
) -> ty.Generator[base.Group, None, None]:
    with chunks:
        yield from chunks
        remainder = chunks.remainder
        if not remainder:
            return
        if strict:
            raise ValueError(
                f"Source ended with {len(remainder)} items left over, "
                f"which do not fill a group of {chunks.size}."
            )
        yield remainder
