"""FastAPI application entrypoint for the count service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from count_service import __version__
from count_service.config import Settings, get_settings
from count_service.counts.routes import router as counts_router
from count_service.lib.logger import configure_logging, get_logger
from count_service.lib.metrics import MetricsRegistry
from count_service.lib.request_logger import RequestLoggerMiddleware
from count_service.store import CounterStore, build_store

logger = get_logger(__name__)


def create_app(store: CounterStore | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the application around ``store``, or the store ``settings`` selects."""

    settings = settings or get_settings()
    configure_logging(settings.log_level.upper())
    if store is None:
        store = build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("count.app.startup", extra={"backend": app.state.counter_store.name})
        yield
        app.state.counter_store.close()
        logger.info("count.app.shutdown", extra={"backend": app.state.counter_store.name})

    app = FastAPI(title="Count Service", version=__version__, lifespan=lifespan)
    app.add_middleware(RequestLoggerMiddleware)

    app.state.counter_store = store
    app.state.metrics = MetricsRegistry()

    app.include_router(counts_router, tags=["count"])

    @app.get("/healthcheck", tags=["system"], summary="Health check")
    async def health_check() -> JSONResponse:
        """Return liveness response for uptime monitoring."""
        return JSONResponse({"ok": True})

    @app.get("/metrics", tags=["system"], summary="Metrics endpoint")
    async def metrics_endpoint() -> JSONResponse:
        snapshot = app.state.metrics.snapshot()
        return JSONResponse({"ok": True, "data": snapshot})

    return app


app = create_app()
