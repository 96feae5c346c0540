"""
Sources are the producers wrapped by bounded iterables. The two kinds of
producer Python offers are kept apart:

- ``Repeatable`` wraps an iterable (or a factory of iterators) and starts
  a fresh cursor from the beginning every time it is opened.
- ``OnceOnly`` wraps a live iterator, possibly already mid-sequence, and
  hands out that same cursor every time it is opened.

Neither kind pulls an element until a cursor is iterated.
"""
import operator
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, Final, Generic, Optional, TypeVar, Union

__all__ = ["OnceOnly", "Repeatable", "Source", "as_source", "known_length_hint"]

T_co = TypeVar("T_co", covariant=True)

Self = TypeVar("Self", bound="Source")


def known_length_hint(obj: Any, /) -> Optional[int]:
    """
    Returns `operator.length_hint(obj)`, or None if the length is unknown
    or too large to be represented as a C ssize_t.
    """
    try:
        hint = operator.length_hint(obj, -1)
    except OverflowError:
        return None
    return None if hint < 0 else hint


class Source(ABC, Generic[T_co]):

    __slots__ = ()

    @property
    @abstractmethod
    def consumed(self: Self, /) -> bool:
        """True once a cursor which cannot be restarted has been handed out."""
        raise NotImplementedError

    @abstractmethod
    def length_hint(self: Self, /) -> Optional[int]:
        raise NotImplementedError

    @abstractmethod
    def open(self: Self, /) -> Iterator[T_co]:
        raise NotImplementedError

    @property
    @abstractmethod
    def reiterable(self: Self, /) -> bool:
        raise NotImplementedError

    @property
    def sequence(self: Self, /) -> Optional[Sequence[T_co]]:
        return None


class Repeatable(Source[T_co], Generic[T_co]):
    _factory: Final[Optional[Callable[[], Iterator[T_co]]]]
    _iterable: Final[Optional[Iterable[T_co]]]

    __slots__ = {
        "_factory":
            "A callable returning a fresh iterator, or None.",
        "_iterable":
            "The re-iterable object, or None.",
    }

    def __init__(self: Self, iterable: Union[Iterable[T_co], Callable[[], Iterator[T_co]]], /) -> None:
        if isinstance(iterable, Iterator):
            raise TypeError(f"iterators can only be traversed once, use OnceOnly({iterable!r}) instead")
        elif isinstance(iterable, Iterable):
            self._factory = None
            self._iterable = iterable
        elif callable(iterable):
            self._factory = iterable
            self._iterable = None
        else:
            raise TypeError(f"expected an iterable or a callable, got {iterable!r}")

    def __repr__(self: Self, /) -> str:
        if self._iterable is None:
            return f"{type(self).__name__}({self._factory!r})"
        return f"{type(self).__name__}({self._iterable!r})"

    @property
    def consumed(self: Self, /) -> bool:
        return False

    def length_hint(self: Self, /) -> Optional[int]:
        if self._iterable is None:
            return None
        return known_length_hint(self._iterable)

    def open(self: Self, /) -> Iterator[T_co]:
        if self._iterable is not None:
            return iter(self._iterable)
        iterator = self._factory()
        if not isinstance(iterator, Iterator):
            raise TypeError(f"expected the factory to return an iterator, got {iterator!r}")
        return iterator

    @property
    def reiterable(self: Self, /) -> bool:
        return True

    @property
    def sequence(self: Self, /) -> Optional[Sequence[T_co]]:
        if isinstance(self._iterable, Sequence):
            return self._iterable
        return None


class OnceOnly(Source[T_co], Generic[T_co]):
    _iterator: Final[Iterator[T_co]]
    _opened: bool

    __slots__ = {
        "_iterator":
            "The live cursor.",
        "_opened":
            "Set once the cursor has been handed out.",
    }

    def __init__(self: Self, iterator: Iterator[T_co], /) -> None:
        if not isinstance(iterator, Iterator):
            raise TypeError(f"expected an iterator, got {iterator!r}")
        self._iterator = iterator
        self._opened = False

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._iterator!r})"

    @property
    def consumed(self: Self, /) -> bool:
        return self._opened

    def length_hint(self: Self, /) -> Optional[int]:
        return known_length_hint(self._iterator)

    def open(self: Self, /) -> Iterator[T_co]:
        self._opened = True
        return self._iterator

    @property
    def opened(self: Self, /) -> bool:
        return self._opened

    @property
    def reiterable(self: Self, /) -> bool:
        return False


def as_source(obj: Any, /) -> Source[Any]:
    if isinstance(obj, Source):
        return obj
    elif isinstance(obj, Iterator):
        return OnceOnly(obj)
    elif isinstance(obj, Iterable) or callable(obj):
        return Repeatable(obj)
    else:
        raise TypeError(f"expected an iterable, an iterator or an iterator factory, got {obj!r}")
