"""Health, metrics, and logging tests."""

from __future__ import annotations

import json
import logging
import sys

import pytest
from httpx import ASGITransport, AsyncClient

from count_service.errors import BackendUnavailable
from count_service.lib.logger import JsonFormatter
from count_service.main import create_app
from count_service.store import InMemoryCounterStore


class _UnavailableStore(InMemoryCounterStore):
    name = "unavailable"

    def increment(self, name: str):
        raise BackendUnavailable("throttled", backend=self.name)


class _BrokenStore(InMemoryCounterStore):
    name = "broken"

    def get(self, name: str):
        raise KeyError("driver bug")


@pytest.mark.asyncio
async def test_healthcheck(async_client: AsyncClient) -> None:
    response = await async_client.get("/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_metrics_track_successes(async_client: AsyncClient) -> None:
    await async_client.post("/count/m")
    await async_client.post("/count/m")
    await async_client.get("/count/m")

    response = await async_client.get("/metrics")

    data = response.json()["data"]
    assert data["count.increment.success"] == 2
    assert data["count.get.success"] == 1


@pytest.mark.asyncio
async def test_failures_are_counted_and_logged(settings, caplog: pytest.LogCaptureFixture) -> None:
    app = create_app(_UnavailableStore(), settings)
    caplog.set_level(logging.ERROR, logger="count_service.counts.routes")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        failed = await client.post("/count/fail")
        metrics = await client.get("/metrics")

    assert failed.status_code == 500
    assert metrics.json()["data"]["count.increment.failure"] == 1

    record = next(r for r in caplog.records if r.getMessage() == "count.increment.failure")
    assert record.counter_name == "fail"
    assert record.kind == "backend_unavailable"
    assert record.retryable is True
    assert record.backend == "unavailable"
    assert record.exc_info is not None


@pytest.mark.asyncio
async def test_unexpected_store_exception_is_mapped_and_logged(settings, caplog: pytest.LogCaptureFixture) -> None:
    app = create_app(_BrokenStore(), settings)
    caplog.set_level(logging.ERROR, logger="count_service.counts.routes")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        failed = await client.get("/count/fail")
        metrics = await client.get("/metrics")

    assert failed.status_code == 500
    assert failed.json() == {"status": 500, "msg": "internal server error"}
    assert "driver bug" not in failed.text
    assert metrics.json()["data"]["count.get.failure"] == 1

    record = next(r for r in caplog.records if r.getMessage() == "count.get.failure")
    assert record.kind == "unexpected"
    assert record.retryable is False
    assert record.backend is None


@pytest.mark.asyncio
async def test_requests_are_access_logged(async_client: AsyncClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="count_service.http")

    await async_client.post("/count/logged")

    record = next(r for r in caplog.records if r.getMessage() == "http.request")
    assert record.method == "POST"
    assert record.url == "/count/logged"
    assert record.status == 200


def test_json_formatter_includes_extras_and_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("test").makeRecord(
            "test",
            logging.ERROR,
            __file__,
            1,
            "count.get.failure",
            None,
            exc_info=sys.exc_info(),
            extra={"counter_name": "abc", "opaque": object()},
        )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "count.get.failure"
    assert payload["level"] == "ERROR"
    assert payload["counter_name"] == "abc"
    assert payload["opaque"].startswith("<object")
    assert "RuntimeError: boom" in payload["exception"]
