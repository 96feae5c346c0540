"""
Traversal handles are iterators that can also detach a prefix of their
remaining elements as a separate handle, so a bounded iterable can be
consumed in partitions (for example by a pool of workers).

Splitting never lets the partitions yield more elements in total than the
handle they were split from, and each partition keeps source order.
"""
import logging
import operator
from abc import abstractmethod
from collections import deque
from collections.abc import Callable, Iterator, Sequence
from itertools import islice
from typing import Any, Final, Generic, Optional, TypeVar

from .source import known_length_hint

__all__ = ["BATCH_UNIT", "MAX_BATCH", "IteratorTraversal", "SequenceTraversal", "Traversal"]

T_co = TypeVar("T_co", covariant=True)

Self = TypeVar("Self", bound="Traversal")

logger = logging.getLogger(__name__)

BATCH_UNIT = 1 << 10
MAX_BATCH = 1 << 25

assert BATCH_UNIT <= MAX_BATCH


class Traversal(Iterator[T_co], Generic[T_co]):

    __slots__ = ()

    @abstractmethod
    def __next__(self: Self, /) -> T_co:
        raise NotImplementedError

    @abstractmethod
    def estimate_size(self: Self, /) -> int:
        raise NotImplementedError

    def for_each_remaining(self: Self, action: Callable[[T_co], Any], /) -> None:
        if not callable(action):
            raise TypeError(f"expected a callable action, got {action!r}")
        for element in self:
            action(element)

    def try_advance(self: Self, action: Callable[[T_co], Any], /) -> bool:
        if not callable(action):
            raise TypeError(f"expected a callable action, got {action!r}")
        for element in self:
            action(element)
            return True
        return False

    @abstractmethod
    def try_split(self: Self, /) -> Optional["Traversal[T_co]"]:
        raise NotImplementedError


class SequenceTraversal(Traversal[T_co], Generic[T_co]):
    _index: int
    _sequence: Final[Sequence[T_co]]
    _stop: Final[int]

    __slots__ = {
        "_index":
            "The index of the next element.",
        "_sequence":
            "The random access sequence.",
        "_stop":
            "The index after the last element covered.",
    }

    def __init__(self: Self, sequence: Sequence[T_co], start: int = 0, stop: Optional[int] = None, /) -> None:
        assert isinstance(sequence, Sequence)
        # The stop index may be given for sequences too long for len().
        if stop is None:
            stop = len(sequence)
        range_ = range(stop)[start:]
        self._sequence = sequence
        self._index = range_.start
        self._stop = range_.stop

    def __next__(self: Self, /) -> T_co:
        if self._index >= self._stop:
            raise StopIteration
        element = self._sequence[self._index]
        self._index += 1
        return element

    def __length_hint__(self: Self, /) -> int:
        return self.estimate_size()

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._sequence!r}, {self._index!r}, {self._stop!r})"

    def estimate_size(self: Self, /) -> int:
        return max(self._stop - self._index, 0)

    def try_split(self: Self, /) -> Optional["SequenceTraversal[T_co]"]:
        start = self._index
        middle = (start + self._stop) // 2
        if start >= middle:
            return None
        self._index = middle
        logger.debug("split %d elements off a sequence traversal", middle - start)
        return type(self)(self._sequence, start, middle)


class IteratorTraversal(Traversal[T_co], Generic[T_co]):
    _batch: int
    _iterator: Final[Iterator[T_co]]
    _pending: Final[deque[T_co]]
    _remaining: int

    __slots__ = {
        "_batch":
            "The size of the last batch split off.",
        "_iterator":
            "The underlying cursor.",
        "_pending":
            "Elements already pulled from the cursor but not yet delivered.",
        "_remaining":
            "The amount of elements still allowed to be pulled.",
    }

    def __init__(self: Self, iterator: Iterator[T_co], limit: int, /) -> None:
        assert isinstance(iterator, Iterator)
        self._iterator = iterator
        self._pending = deque()
        self._remaining = max(operator.index(limit), 0)
        self._batch = 0

    def __next__(self: Self, /) -> T_co:
        if len(self._pending) > 0:
            return self._pending.popleft()
        elif self._remaining <= 0:
            raise StopIteration
        try:
            element = next(self._iterator)
        except StopIteration:
            self._remaining = 0
            raise
        self._remaining -= 1
        return element

    def __length_hint__(self: Self, /) -> int:
        hint = known_length_hint(self._iterator)
        if hint is None:
            return NotImplemented
        return len(self._pending) + min(self._remaining, hint)

    def __repr__(self: Self, /) -> str:
        return f"{type(self).__name__}({self._iterator!r}, {self._remaining!r})"

    def estimate_size(self: Self, /) -> int:
        hint = known_length_hint(self._iterator)
        if hint is None:
            return len(self._pending) + self._remaining
        return len(self._pending) + min(self._remaining, hint)

    def try_split(self: Self, /) -> Optional[SequenceTraversal[T_co]]:
        """
        Pull the next batch of elements into a separate traversal.

        If the cursor raises partway through a batch, the elements already
        pulled stay at the front of this traversal and the exception is
        re-raised.
        """
        if self._remaining <= 0 and len(self._pending) == 0:
            return None
        self._batch = min(self._batch + BATCH_UNIT, MAX_BATCH)
        batch = []
        try:
            for element in islice(self, self._batch):
                batch.append(element)
        except BaseException:
            self._pending.extendleft(reversed(batch))
            raise
        if len(batch) == 0:
            return None
        logger.debug("split a batch of %d elements off an iterator traversal", len(batch))
        return SequenceTraversal(batch)
