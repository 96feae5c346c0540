from ._src.bounded_iterable import BoundedIterable
from ._src.source import Source
from ._src.traversal import IteratorTraversal, SequenceTraversal, Traversal

__all__ = [
    "BoundedIterable",
    "IteratorTraversal",
    "SequenceTraversal",
    "Source",
    "Traversal",
]
