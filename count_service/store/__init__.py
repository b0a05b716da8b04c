"""Counter store backends and backend selection."""

from count_service.store.base import CounterStore
from count_service.store.factory import build_store
from count_service.store.memory import InMemoryCounterStore

__all__ = ["CounterStore", "InMemoryCounterStore", "build_store"]
