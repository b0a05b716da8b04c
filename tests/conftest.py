"""Pytest fixtures for count service tests."""

from collections.abc import AsyncIterator, Iterator
import os

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("COUNTER_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from count_service.config import Settings, get_settings
from count_service.main import create_app
from count_service.store import CounterStore, InMemoryCounterStore


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Drop cached settings so tests can reconfigure the environment."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(COUNTER_BACKEND="memory")


@pytest.fixture()
def store() -> InMemoryCounterStore:
    """Return a fresh in-memory store for each test."""
    return InMemoryCounterStore()


@pytest.fixture()
def app(store: CounterStore, settings: Settings) -> FastAPI:
    """Return an application wired to the per-test store."""
    return create_app(store, settings)


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` configured for the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
