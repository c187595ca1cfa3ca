"""
Request middleware: request id correlation, timing and storage health headers.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

from activity_bookings.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
DEGRADED_HEADER = "X-Storage-Degraded"

# polled by probes and scrapers; logged at debug only
_QUIET_PATHS = frozenset({"/health", "/metrics"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Reuses the caller's X-Request-ID (or assigns a short one) and binds it to
    structlog contextvars, so every service and store log line emitted while
    handling the request carries it.

    When any entity store's last write failed, responses carry
    `X-Storage-Degraded: true`: the request succeeded in memory but may not
    survive a restart.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request_failed", error=str(e), duration_ms=_elapsed_ms(started))
            raise

        duration_ms = _elapsed_ms(started)
        if response.status_code >= 500:
            logger.warning("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        elif request.url.path in _QUIET_PATHS:
            logger.debug("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        else:
            logger.info("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        container = getattr(request.app.state, "container", None)
        if container is not None and container.degraded:
            response.headers[DEGRADED_HEADER] = "true"
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
