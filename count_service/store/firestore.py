"""Cloud Firestore-backed counter store."""

from __future__ import annotations

from typing import Any

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from count_service.counts.schemas import Counter
from count_service.errors import BackendRejected, BackendUnavailable, StoreError
from count_service.lib.logger import get_logger
from count_service.store.base import CounterStore

logger = get_logger(__name__)

_TRANSIENT_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.TooManyRequests,
    google_exceptions.ResourceExhausted,
    google_exceptions.InternalServerError,
    google_exceptions.Aborted,
    google_exceptions.RetryError,
)

DEFAULT_COLLECTION = "count"


class FirestoreCounterStore(CounterStore):
    """Counters stored as documents named after the counter.

    ``increment`` sends one merge write carrying a server-side ``Increment``
    transform. Firestore creates the document when it is missing, applies the
    transform atomically, and returns the transformed value in the write
    result, so no read is needed.
    """

    name = "firestore"

    def __init__(self, client: Any, collection: str = DEFAULT_COLLECTION, *, timeout: float | None = 10.0) -> None:
        self._client = client
        self._collection = collection
        self._timeout = timeout

    @classmethod
    def connect(cls, *, project: str | None = None, collection: str = DEFAULT_COLLECTION) -> "FirestoreCounterStore":
        """Build a store around a Firestore client using ambient credentials."""

        client = firestore.Client(project=project)
        logger.info(
            "count.store.firestore.connect",
            extra={"project": client.project, "collection": collection},
        )
        return cls(client, collection)

    def get(self, name: str) -> Counter:
        try:
            snapshot = self._document(name).get(retry=None, timeout=self._timeout)
        except (ValueError, google_exceptions.GoogleAPIError) as exc:
            raise self._translate(exc, "get") from exc

        if not snapshot.exists:
            return Counter(name=name, count=0)
        data = snapshot.to_dict() or {}
        return Counter(name=name, count=int(data.get("count", 0)))

    def increment(self, name: str) -> Counter:
        try:
            result = self._document(name).set(
                {"name": name, "count": firestore.Increment(1)},
                merge=True,
                retry=None,
                timeout=self._timeout,
            )
        except (ValueError, google_exceptions.GoogleAPIError) as exc:
            raise self._translate(exc, "increment") from exc

        transformed = result.transform_results
        if not transformed:
            raise BackendRejected("Firestore increment returned no transform result", backend=self.name)
        return Counter(name=name, count=int(transformed[0].integer_value))

    def close(self) -> None:
        self._client.close()

    def _document(self, name: str):
        return self._client.collection(self._collection).document(name)

    def _translate(self, exc: Exception, operation: str) -> StoreError:
        if isinstance(exc, _TRANSIENT_ERRORS):
            return BackendUnavailable(f"Firestore {operation} failed ({type(exc).__name__})", backend=self.name)
        return BackendRejected(f"Firestore {operation} rejected ({type(exc).__name__})", backend=self.name)
