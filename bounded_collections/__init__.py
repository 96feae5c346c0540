"""
Bounded views over finite and infinite iterables. A bounded sequence
yields at most a fixed amount of elements from its source, pulling them
lazily, so unbounded producers such as counters and generators can be
collected, iterated, or split into partitions without running forever.
"""
import logging

from . import abc
from ._src.bounded_sequence import BoundedSequence
from ._src.errors import SourceConsumedError
from ._src.source import OnceOnly, Repeatable, as_source

__all__ = [
    "BoundedSequence",
    "OnceOnly",
    "Repeatable",
    "SourceConsumedError",
    "abc",
    "as_source",
]

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
