from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from .traversal import IteratorTraversal, Traversal

__all__ = ["BoundedIterable"]

T_co = TypeVar("T_co", covariant=True)

Self = TypeVar("Self", bound="BoundedIterable")


class BoundedIterable(Iterable[T_co], ABC, Generic[T_co]):
    """
    An iterable that never yields more than `limit` elements per traversal.

    Subclasses implement `__iter__` and `limit`; the consumers below are
    derived from them.
    """

    __slots__ = ()

    @abstractmethod
    def __iter__(self: Self, /) -> Iterator[T_co]:
        raise NotImplementedError

    def for_each(self: Self, action: Callable[[T_co], Any], /) -> None:
        """Apply `action` to every element of one traversal, in order."""
        if not callable(action):
            raise TypeError(f"expected a callable action, got {action!r}")
        for element in self:
            action(element)

    @property
    @abstractmethod
    def limit(self: Self, /) -> int:
        raise NotImplementedError

    def to_list(self: Self, /) -> list[T_co]:
        return [*self]

    def to_set(self: Self, /) -> set[T_co]:
        return {*self}

    def traversal(self: Self, /) -> Traversal[T_co]:
        """Return a traversal handle which may be split into partitions."""
        return IteratorTraversal(iter(self), self.limit)

    def traverse(self: Self, /) -> Iterator[T_co]:
        return iter(self)
