import logging
import operator
import sys
from collections.abc import Callable, Iterable, Iterator
from itertools import islice
from typing import Final, Generic, TypeVar, Union

from .bounded_iterable import BoundedIterable
from .errors import SourceConsumedError
from .source import Source, as_source
from .traversal import IteratorTraversal, SequenceTraversal, Traversal

__all__ = ["BoundedSequence"]

T_co = TypeVar("T_co", covariant=True)

Self = TypeVar("Self", bound="BoundedSequence")

logger = logging.getLogger(__name__)


class BoundedSequence(BoundedIterable[T_co], Generic[T_co]):
    """
    A lazy view of at most `limit` elements of a finite or infinite source.

    The source may be a re-iterable object, a callable returning fresh
    iterators, or a live iterator. Re-iterable sources restart from their
    beginning on every traversal. A live iterator can only be traversed
    once: later traversals continue from wherever the first one left the
    cursor, which is normally its end, unless `strict` is set, in which
    case they raise `SourceConsumedError`.

    Usage:
        >>> from itertools import count
        >>> numbers = BoundedSequence(count(), 5)
        >>> numbers.to_list()
        [0, 1, 2, 3, 4]
        >>> BoundedSequence("abc", 10).to_list()
        ['a', 'b', 'c']

    A negative limit raises `ValueError`.
    """
    _limit: Final[int]
    _source: Final[Source[T_co]]
    _strict: Final[bool]

    __slots__ = {
        "_limit":
            "The maximum amount of elements yielded per traversal.",
        "_source":
            "The wrapped source.",
        "_strict":
            "Whether repeated traversals of a once-only source are rejected.",
    }

    def __init__(
        self: Self,
        source: Union[Source[T_co], Iterable[T_co], Callable[[], Iterator[T_co]]],
        limit: int,
        /,
        *,
        strict: bool = False,
    ) -> None:
        try:
            limit = operator.index(limit)
        except TypeError:
            raise TypeError(f"expected an integer limit, got {limit!r}") from None
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit!r}")
        self._source = as_source(source)
        self._limit = limit
        self._strict = bool(strict)
        logger.debug("created %r", self)

    def __iter__(self: Self, /) -> Iterator[T_co]:
        return islice(self._open(), self._limit)

    def __length_hint__(self: Self, /) -> int:
        hint = self._source.length_hint()
        if hint is None:
            return NotImplemented
        return min(hint, self._limit)

    def __repr__(self: Self, /) -> str:
        if self._strict:
            return f"{type(self).__name__}({self._source!r}, {self._limit!r}, strict=True)"
        return f"{type(self).__name__}({self._source!r}, {self._limit!r})"

    def _open(self: Self, /) -> Iterator[T_co]:
        source = self._source
        if not source.reiterable and source.consumed:
            if self._strict:
                raise SourceConsumedError(f"{source!r} has already been traversed")
            logger.debug("re-traversing the once-only source of %r", self)
        return source.open()

    @property
    def limit(self: Self, /) -> int:
        return self._limit

    @property
    def reiterable(self: Self, /) -> bool:
        return self._source.reiterable

    def traversal(self: Self, /) -> Traversal[T_co]:
        sequence = self._source.sequence
        if sequence is not None:
            try:
                stop = min(len(sequence), self._limit)
            except OverflowError:
                # The sequence is longer than sys.maxsize.
                stop = self._limit if self._limit <= sys.maxsize else None
            if stop is not None:
                return SequenceTraversal(sequence, 0, stop)
        return IteratorTraversal(self._open(), self._limit)
