"""Priority queue of candidate ears.

Entries are ``(ratio, ind, prev, next)``: the apex node, the neighbors it
had when it was queued and its quality ratio. Entries with ratio 0 mark
degenerate ears and are always served first, most recent first. The
remaining entries are served according to the EarOrder policy.
"""
from __future__ import annotations

import heapq
import itertools
import random
from typing import List, Optional, Tuple

from .config import EarOrder

Entry = Tuple[float, int, int, int]

__all__ = ['EarQueue', 'Entry']


class EarQueue:
    def __init__(self, policy: EarOrder = EarOrder.SEQUENCE, rng: Optional[random.Random] = None):
        self.policy = EarOrder.parse(policy)
        self.rng = rng if rng is not None else random.Random()
        self._zero: List[Entry] = []
        self._entries: list = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._zero) + len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._zero) or bool(self._entries)

    def clear(self) -> None:
        self._zero.clear()
        self._entries.clear()

    def insert(self, ratio: float, ind: int, prev: int, nxt: int) -> None:
        if ratio == 0.0:
            self._zero.append((0.0, ind, prev, nxt))
        elif self.policy is EarOrder.SORTED:
            heapq.heappush(self._entries, (ratio, next(self._counter), ind, prev, nxt))
        else:
            self._entries.append((ratio, ind, prev, nxt))

    def pop(self) -> Optional[Entry]:
        """Remove and return the next entry, or None if the queue is empty."""
        if self._zero:
            return self._zero.pop()
        entries = self._entries
        if not entries:
            return None
        if self.policy is EarOrder.SORTED:
            ratio, _, ind, prev, nxt = heapq.heappop(entries)
            return ratio, ind, prev, nxt
        if self.policy is EarOrder.RANDOM:
            k = min(int(self.rng.random() * len(entries)), len(entries) - 1)
            last = entries.pop()
            if k == len(entries):
                return last
            entry = entries[k]
            entries[k] = last
            return entry
        return entries.pop()
