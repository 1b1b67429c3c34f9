"""
``chunkpipe.sources``
=====================

Helpers for the iterators wrapped by chunk adapters: estimating how many
items they have left, and building sources which do not stay exhausted.
"""
import operator as op
import sys
import typing as ty
import warnings

from chunkpipe import base

__all__ = ["size_hint", "FromFn"]


T = ty.TypeVar("T")

_EXACT_ITERATORS: ty.Tuple[type, ...] = tuple(
    {
        type(iter([])),
        type(iter(())),
        type(iter(range(0))),
        type(iter(range(2**64))),
        type(iter("")),
        type(iter("\u00e9")),
        type(iter(b"")),
        type(iter(bytearray())),
        type(iter({})),
        type(iter({}.values())),
        type(iter({}.items())),
        type(iter(set())),
        type(reversed([])),
        type(reversed(range(0))),
    }
)


def size_hint(source: ty.Iterator[ty.Any]) -> base.SizeHint:
    """Returns bounds on the number of items left in ``source``.

    :group: Sources

    Parameters
    ----------
    source : Iterator
        The iterator to inspect. It is not advanced.

    Returns
    -------
    lower : int
        Minimum number of items ``source`` will yield.
    upper : int, optional
        Maximum number of items ``source`` will yield, or ``None`` if it
        is not known.

    Notes
    -----
    Objects with a ``size_hint()`` method are asked directly. Built-in
    iterators over fixed containers report their remaining length as
    both bounds. For anything else, ``operator.length_hint()`` supplies
    the lower bound, and the upper bound is unknown.
    """
    hint_method = getattr(source, "size_hint", None)
    if callable(hint_method):
        lower, upper = hint_method()
        if upper is not None and upper < lower:
            warnings.warn(
                f"{type(source).__name__}.size_hint() returned an upper "
                f"bound ({upper}) below its lower bound ({lower}). "
                "Upper bound will be treated as unknown.",
                UserWarning,
            )
            upper = None
        return lower, upper
    try:
        lower = op.length_hint(source, 0)
    except OverflowError:  # remaining length exceeds sys.maxsize
        return sys.maxsize, None
    if isinstance(source, _EXACT_ITERATORS):
        return lower, lower
    return lower, None


class FromFn(ty.Iterator[T]):
    """Iterator calling ``func`` for each item, which stops whenever
    ``func`` returns ``sentinel``.

    :group: Sources

    Unlike ``iter(func, sentinel)``, a ``FromFn`` is not fused: after
    raising ``StopIteration`` it continues to call ``func`` on
    subsequent ``next()`` calls, and yields again if ``func`` does.

    Parameters
    ----------
    func : callable
        Zero argument callable producing the items.
    sentinel : object
        Value signalling that no item is currently available. Compared
        by identity. Default is ``None``.
    """

    def __init__(
        self, func: ty.Callable[[], ty.Any], sentinel: ty.Any = None
    ) -> None:
        self.func = func
        self.sentinel = sentinel

    def __iter__(self) -> "FromFn[T]":
        return self

    def __next__(self) -> T:
        item = self.func()
        if item is self.sentinel:
            raise StopIteration
        return item

    def size_hint(self) -> base.SizeHint:
        return 0, None
