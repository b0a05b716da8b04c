"""Counter store contract shared by every storage backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from count_service.counts.schemas import Counter


class CounterStore(ABC):
    """Read and atomically increment named counters.

    Implementations must perform "create at zero if absent, then add one" as a
    single indivisible step so that concurrent increments for the same name are
    never lost. A read-then-write sequence in application code does not qualify.

    Failures surface as :class:`~count_service.errors.BackendUnavailable` or
    :class:`~count_service.errors.BackendRejected`. Stores never retry.
    """

    name: str = "abstract"

    @abstractmethod
    def get(self, name: str) -> Counter:
        """Return the counter for ``name``, or a zero counter if none exists.

        Must not create persistent state.
        """

    @abstractmethod
    def increment(self, name: str) -> Counter:
        """Apply exactly one +1 to ``name`` (creating it at 1) and return the result."""

    def close(self) -> None:
        """Release client resources held by the store."""
