"""Process-local counter store guarded by a single lock."""

from __future__ import annotations

import threading

from count_service.counts.schemas import Counter
from count_service.store.base import CounterStore


class InMemoryCounterStore(CounterStore):
    """Reference backend holding counts in a dict.

    One lock covers the whole map and every increment holds it across the
    lookup and the write.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}

    def get(self, name: str) -> Counter:
        with self._lock:
            count = self._counts.get(name, 0)
        return Counter(name=name, count=count)

    def increment(self, name: str) -> Counter:
        with self._lock:
            count = self._counts.get(name, 0) + 1
            self._counts[name] = count
        return Counter(name=name, count=count)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
