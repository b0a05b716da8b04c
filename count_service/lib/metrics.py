"""In-process registry of request outcome metrics served at `/metrics`."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Dict


class MetricsRegistry:
    """Named integer counters such as `count.get.success`, safe across worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Counter[str] = Counter()

    def increment(self, name: str, value: int = 1) -> None:
        with self._lock:
            self._counters[name] += value

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
