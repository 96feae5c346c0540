from concurrent.futures import ThreadPoolExecutor
from itertools import count, islice

import pytest

from bounded_collections import BoundedSequence
from bounded_collections.abc import IteratorTraversal, SequenceTraversal, Traversal
from bounded_collections._src.traversal import BATCH_UNIT


def split_all(traversal):
    partitions = [traversal]
    index = 0
    while index < len(partitions):
        prefix = partitions[index].try_split()
        if prefix is None:
            index += 1
        else:
            partitions.insert(index, prefix)
    return partitions


def test_traversal_of_infinite_iterable():
    traversal = BoundedSequence(count, 1000).traversal()
    assert isinstance(traversal, IteratorTraversal)
    assert [*traversal] == [*range(1000)]


def test_traversal_of_sequence_uses_index_ranges():
    traversal = BoundedSequence(range(10_000), 1000).traversal()
    assert isinstance(traversal, SequenceTraversal)
    assert traversal.estimate_size() == 1000
    assert [*traversal] == [*range(1000)]


def test_try_advance():
    traversal = BoundedSequence("ab", 5).traversal()
    result = []
    assert traversal.try_advance(result.append)
    assert traversal.try_advance(result.append)
    assert not traversal.try_advance(result.append)
    assert result == ["a", "b"]


def test_for_each_remaining():
    traversal = BoundedSequence(count(), 5).traversal()
    result = []
    traversal.try_advance(result.append)
    traversal.for_each_remaining(result.append)
    assert result == [0, 1, 2, 3, 4]


def test_sequence_split_keeps_order_and_limit():
    traversal = BoundedSequence([*range(100)], 37).traversal()
    partitions = split_all(traversal)
    assert len(partitions) > 1
    assert [x for partition in partitions for x in partition] == [*range(37)]


def test_sequence_split_halves():
    traversal = SequenceTraversal("abcd")
    prefix = traversal.try_split()
    assert [*prefix] == ["a", "b"]
    assert [*traversal] == ["c", "d"]


def test_sequence_split_of_single_element_fails():
    traversal = SequenceTraversal([1])
    assert traversal.try_split() is None
    assert [*traversal] == [1]


def test_iterator_split_keeps_order_and_limit():
    limit = 3 * BATCH_UNIT + 5
    traversal = BoundedSequence(count(), limit).traversal()
    first = traversal.try_split()
    second = traversal.try_split()
    assert first.estimate_size() == BATCH_UNIT
    assert second.estimate_size() == min(2 * BATCH_UNIT, limit - BATCH_UNIT)
    rest = [*traversal]
    combined = [*first] + [*second] + rest
    assert combined == [*range(limit)]


def test_iterator_split_never_exceeds_limit():
    traversal = BoundedSequence(count(), 10).traversal()
    prefix = traversal.try_split()
    assert [*prefix] == [*range(10)]
    assert traversal.try_split() is None
    assert [*traversal] == []


def test_iterator_split_of_short_source():
    traversal = BoundedSequence(iter([1, 2, 3]), 10).traversal()
    prefix = traversal.try_split()
    assert [*prefix] == [1, 2, 3]
    assert traversal.try_split() is None


def test_estimate_size_uses_source_hint():
    assert BoundedSequence(iter([1, 2, 3]), 10).traversal().estimate_size() == 3
    assert BoundedSequence(count(), 10).traversal().estimate_size() == 10


def test_partitions_can_be_consumed_in_parallel():
    traversal = BoundedSequence([*range(5000)], 4321).traversal()
    partitions = split_all(traversal)
    with ThreadPoolExecutor(max_workers=4) as executor:
        results = [*executor.map(list, partitions)]
    assert [x for result in results for x in result] == [*range(4321)]


def test_traversal_is_an_iterator():
    traversal = BoundedSequence([1, 2], 2).traversal()
    assert isinstance(traversal, Traversal)
    assert iter(traversal) is traversal


def test_try_advance_rejects_non_callable():
    with pytest.raises(TypeError):
        BoundedSequence([1], 1).traversal().try_advance(1)


def failing_after(n, error):
    def numbers():
        yield from range(n)
        raise error
    return numbers


def test_source_errors_propagate_through_next():
    error = KeyError("boom")
    traversal = BoundedSequence(failing_after(2, error), 10).traversal()
    assert next(traversal) == 0
    assert next(traversal) == 1
    with pytest.raises(KeyError) as info:
        next(traversal)
    assert info.value is error
    assert [*traversal] == []


def test_source_errors_propagate_through_try_advance():
    error = KeyError("boom")
    traversal = BoundedSequence(failing_after(1, error), 10).traversal()
    result = []
    assert traversal.try_advance(result.append)
    with pytest.raises(KeyError) as info:
        traversal.try_advance(result.append)
    assert info.value is error
    assert result == [0]


def test_source_errors_propagate_through_for_each_remaining():
    error = KeyError("boom")
    traversal = BoundedSequence(failing_after(3, error), 10).traversal()
    result = []
    with pytest.raises(KeyError) as info:
        traversal.for_each_remaining(result.append)
    assert info.value is error
    assert result == [0, 1, 2]


def test_failed_split_keeps_pulled_elements():
    error = KeyError("boom")
    traversal = BoundedSequence(failing_after(5, error), 100).traversal()
    with pytest.raises(KeyError) as info:
        traversal.try_split()
    assert info.value is error
    assert traversal.estimate_size() >= 5
    assert [*traversal] == [0, 1, 2, 3, 4]


def test_split_after_failed_split_returns_pulled_elements():
    traversal = BoundedSequence(failing_after(5, KeyError("boom")), 100).traversal()
    with pytest.raises(KeyError):
        traversal.try_split()
    prefix = traversal.try_split()
    assert [*prefix] == [0, 1, 2, 3, 4]
    assert traversal.try_split() is None


def test_creating_a_traversal_pulls_nothing():
    pulled = []

    def numbers():
        for i in count():
            pulled.append(i)
            yield i

    traversal = BoundedSequence(numbers, 5).traversal()
    assert pulled == []
    assert next(traversal) == 0
    assert pulled == [0]
    BoundedSequence(numbers(), 5).traversal()
    assert pulled == [0]


def test_traversal_of_sequence_longer_than_maxsize():
    traversal = BoundedSequence(range(10**30), 5).traversal()
    assert isinstance(traversal, SequenceTraversal)
    assert traversal.estimate_size() == 5
    assert [*traversal] == [0, 1, 2, 3, 4]


def test_traversal_with_limit_beyond_maxsize():
    limit = 10**25
    traversal = BoundedSequence(range(10**30), limit).traversal()
    assert isinstance(traversal, IteratorTraversal)
    assert traversal.estimate_size() == limit
    assert [*islice(traversal, 3)] == [0, 1, 2]
