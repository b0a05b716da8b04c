"""Per-request access logging middleware."""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from count_service.lib.logger import get_logger

logger = get_logger("count_service.http")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Emit one structured `http.request` record for every handled request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        client = request.client
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "url": request.url.path,
                "status": response.status_code,
                "response_size": response.headers.get("content-length"),
                "user_agent": request.headers.get("user-agent"),
                "remote_ip": client.host if client else None,
                "referer": request.headers.get("referer"),
                "protocol": f"HTTP/{request.scope.get('http_version', '1.1')}",
                "response_time_ms": round(elapsed_ms, 3),
            },
        )
        return response
