"""Counter store failure taxonomy and the HTTP error envelope."""

from __future__ import annotations

from fastapi.responses import JSONResponse

INTERNAL_ERROR_STATUS = 500
INTERNAL_ERROR_BODY = {"status": INTERNAL_ERROR_STATUS, "msg": "internal server error"}


class StoreError(RuntimeError):
    """Raised when a counter store cannot complete an operation."""

    kind = "store_error"
    retryable = False

    def __init__(self, message: str, *, backend: str | None = None) -> None:
        super().__init__(message)
        self.backend = backend


class BackendUnavailable(StoreError):
    """Transient infrastructure failure such as a network error or throttling."""

    kind = "backend_unavailable"
    retryable = True


class BackendRejected(StoreError):
    """The backend refused the request, e.g. a key failing its native validation."""

    kind = "backend_rejected"
    retryable = False


def error_response() -> JSONResponse:
    """Return the fixed, non-leaking response used for every store failure."""

    return JSONResponse(status_code=INTERNAL_ERROR_STATUS, content=dict(INTERNAL_ERROR_BODY))
