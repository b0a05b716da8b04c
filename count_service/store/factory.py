"""Construct the configured counter store."""

from __future__ import annotations

from count_service.config import Settings
from count_service.lib.logger import get_logger
from count_service.store.base import CounterStore
from count_service.store.memory import InMemoryCounterStore

logger = get_logger(__name__)


def build_store(settings: Settings) -> CounterStore:
    """Return a new store for the backend selected by ``settings``.

    Durable backends are imported lazily so the in-memory backend does not pull
    in cloud client libraries.
    """

    backend = settings.backend
    store: CounterStore
    if backend == "memory":
        store = InMemoryCounterStore()
    elif backend == "dynamodb":
        if not settings.table_name:
            raise ValueError("TABLE_NAME is required for the dynamodb backend")
        from count_service.store.dynamo import DynamoCounterStore

        store = DynamoCounterStore.connect(
            settings.table_name,
            region=settings.dynamodb_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )
    elif backend == "firestore":
        from count_service.store.firestore import FirestoreCounterStore

        store = FirestoreCounterStore.connect(
            project=settings.firestore_project,
            collection=settings.firestore_collection,
        )
    else:  # pragma: no cover - guarded by the settings Literal
        raise ValueError(f"Unknown counter backend: {backend}")

    logger.info("count.store.selected", extra={"backend": store.name})
    return store
