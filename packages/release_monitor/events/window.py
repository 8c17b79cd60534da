"""Bounded recency window of delivered event ids."""

from collections import deque
from collections.abc import Iterable
from typing import Deque, Set


class SeenEventWindow:
    """
    FIFO window of the last ``capacity`` delivered event ids.

    Membership is O(1); pushing past capacity evicts the oldest ids first.
    Owned by the single events monitor loop.
    """

    def __init__(self, capacity: int = 200):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._order: Deque[int] = deque()
        self._members: Set[int] = set()

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._members

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self):
        return iter(list(self._order))

    def push(self, event_id: int) -> None:
        self._order.append(event_id)
        self._members.add(event_id)
        self._trim()

    def extend(self, event_ids: Iterable[int]) -> None:
        for event_id in event_ids:
            self._order.append(event_id)
            self._members.add(event_id)
        self._trim()

    def clear(self) -> None:
        self._order.clear()
        self._members.clear()

    def _trim(self) -> None:
        while len(self._order) > self.capacity:
            evicted = self._order.popleft()
            # Duplicate ids can appear in the order queue only if pushed twice.
            if evicted not in self._order:
                self._members.discard(evicted)
