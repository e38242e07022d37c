import random

from fist.core.config import EarOrder
from fist.core.ear_queue import EarQueue


def _drain(q):
    out = []
    while True:
        entry = q.pop()
        if entry is None:
            return out
        out.append(entry)


def test_zero_ratio_served_first_most_recent_first():
    q = EarQueue(EarOrder.SORTED)
    q.insert(0.5, 1, 0, 2)
    q.insert(0.0, 3, 2, 4)
    q.insert(0.2, 5, 4, 6)
    q.insert(0.0, 7, 6, 8)
    assert [e[1] for e in _drain(q)] == [7, 3, 5, 1]


def test_sorted_is_fifo_among_equal_ratios():
    q = EarQueue('sorted')
    for ind in (10, 11, 12):
        q.insert(1.0, ind, ind - 1, ind + 1)
    q.insert(0.3, 20, 19, 21)
    assert [e[1] for e in _drain(q)] == [20, 10, 11, 12]


def test_sequence_is_lifo():
    q = EarQueue(EarOrder.SEQUENCE)
    for ind in (1, 2, 3):
        q.insert(1.0, ind, 0, 0)
    assert len(q) == 3
    assert [e[1] for e in _drain(q)] == [3, 2, 1]
    assert not q


def test_random_pops_every_entry_once_and_is_seeded():
    def order(seed):
        q = EarQueue(EarOrder.RANDOM, random.Random(seed))
        for ind in range(20):
            q.insert(1.0, ind, 0, 0)
        return [e[1] for e in _drain(q)]

    first = order(4)
    assert sorted(first) == list(range(20))
    assert order(4) == first


def test_clear():
    q = EarQueue()
    q.insert(0.0, 1, 0, 2)
    q.insert(1.0, 2, 1, 3)
    q.clear()
    assert len(q) == 0
    assert q.pop() is None
