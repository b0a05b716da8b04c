"""DynamoDB-backed counter store."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from count_service.counts.schemas import Counter
from count_service.errors import BackendRejected, BackendUnavailable, StoreError
from count_service.lib.logger import get_logger
from count_service.store.base import CounterStore

logger = get_logger(__name__)

# DynamoDB error codes that indicate a transient condition worth retrying.
_RETRYABLE_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
        "InternalServerError",
        "ServiceUnavailable",
        "TransactionConflictException",
    }
)

_INCREMENT_EXPRESSION = "SET #c = if_not_exists(#c, :zero) + :one"


class DynamoCounterStore(CounterStore):
    """Counters stored as items keyed by ``name`` in a DynamoDB table.

    ``increment`` is a single ``UpdateItem`` call so DynamoDB's item-level
    atomicity serializes concurrent increments for the same name.
    """

    name = "dynamodb"

    def __init__(self, table: Any) -> None:
        self._table = table

    @classmethod
    def connect(
        cls,
        table_name: str,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> "DynamoCounterStore":
        """Build a store around a boto3 ``Table`` resource for ``table_name``."""

        resource = boto3.resource("dynamodb", region_name=region, endpoint_url=endpoint_url)
        logger.info(
            "count.store.dynamodb.connect",
            extra={"table": table_name, "region": region, "endpoint_url": endpoint_url},
        )
        return cls(resource.Table(table_name))

    @property
    def table_name(self) -> str:
        return self._table.name

    def get(self, name: str) -> Counter:
        try:
            result = self._table.get_item(Key={"name": name}, ConsistentRead=True)
        except (BotoCoreError, ClientError) as exc:
            raise self._translate(exc, "get") from exc

        item = result.get("Item")
        if not item:
            return Counter(name=name, count=0)
        return Counter(name=name, count=int(item.get("count", 0)))

    def increment(self, name: str) -> Counter:
        try:
            result = self._table.update_item(
                Key={"name": name},
                UpdateExpression=_INCREMENT_EXPRESSION,
                ExpressionAttributeNames={"#c": "count"},
                ExpressionAttributeValues={":zero": 0, ":one": 1},
                ReturnValues="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._translate(exc, "increment") from exc

        attributes = result.get("Attributes") or {}
        return Counter(name=name, count=int(attributes["count"]))

    def close(self) -> None:
        client = self._table.meta.client
        close = getattr(client, "close", None)
        if callable(close):
            close()

    def _translate(self, exc: BotoCoreError | ClientError, operation: str) -> StoreError:
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _RETRYABLE_CODES:
                return BackendUnavailable(f"DynamoDB {operation} failed ({code})", backend=self.name)
            return BackendRejected(f"DynamoDB {operation} rejected ({code or 'unknown'})", backend=self.name)
        return BackendUnavailable(f"DynamoDB {operation} failed ({type(exc).__name__})", backend=self.name)
