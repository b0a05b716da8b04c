"""HTTP routes reading and incrementing named counters."""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from count_service.counts.schemas import Counter
from count_service.errors import error_response
from count_service.lib.logger import get_logger
from count_service.lib.metrics import MetricsRegistry
from count_service.store.base import CounterStore

router = APIRouter()

logger = get_logger(__name__)


def get_counter_store(request: Request) -> CounterStore:
    store: CounterStore | None = getattr(request.app.state, "counter_store", None)
    if store is None:
        raise RuntimeError("Counter store not configured on application state")
    return store


def get_metrics(request: Request) -> MetricsRegistry:
    metrics: MetricsRegistry | None = getattr(request.app.state, "metrics", None)
    if metrics is None:
        metrics = MetricsRegistry()
        request.app.state.metrics = metrics
    return metrics


async def _run_store_operation(
    operation: str,
    call: Callable[[str], Counter],
    name: str,
    metrics: MetricsRegistry,
) -> JSONResponse:
    """Run a blocking store call off the event loop and serialize the outcome."""

    try:
        counter = await run_in_threadpool(call, name)
    except Exception as exc:  # noqa: BLE001 - StoreError, or anything an injected store raises
        return _store_failure(operation, name, exc, metrics)

    metrics.increment(f"count.{operation}.success")
    return JSONResponse(counter.model_dump(mode="json"))


def _store_failure(operation: str, name: str, exc: Exception, metrics: MetricsRegistry) -> JSONResponse:
    metrics.increment(f"count.{operation}.failure")
    logger.error(
        f"count.{operation}.failure",
        exc_info=exc,
        extra={
            "counter_name": name,
            "kind": getattr(exc, "kind", "unexpected"),
            "retryable": getattr(exc, "retryable", False),
            "backend": getattr(exc, "backend", None),
        },
    )
    return error_response()


@router.get("/count/{name}")
async def get_count(
    name: str,
    store: CounterStore = Depends(get_counter_store),
    metrics: MetricsRegistry = Depends(get_metrics),
) -> JSONResponse:
    """Return the current value of a counter, zero if it was never incremented."""

    return await _run_store_operation("get", store.get, name, metrics)


@router.post("/count/{name}")
async def increment_count(
    name: str,
    store: CounterStore = Depends(get_counter_store),
    metrics: MetricsRegistry = Depends(get_metrics),
) -> JSONResponse:
    """Atomically add one to a counter and return its new value.

    Any request body is ignored.
    """

    return await _run_store_operation("increment", store.increment, name, metrics)
