"""
Request logging middleware.

Every request gets an id (taken from ``X-Request-ID`` when the caller sends
a sane one) that is bound into the structlog context, so ledger and sales
events logged while handling it carry the same id.
"""

import re
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockbook.config import get_logger, get_settings

logger = get_logger(__name__)

REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def resolve_request_id(header: str | None) -> str:
    """Reuse the caller's request id if well-formed, else mint a short one."""
    if header and REQUEST_ID_PATTERN.match(header):
        return header
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its outcome and duration.

    Writes (stock movements, sales, catalog changes) log at INFO, reads at
    DEBUG. Requests slower than ``API_SLOW_REQUEST_MS`` log a warning.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        is_write = request.method in WRITE_METHODS
        log = logger.info if is_write else logger.debug
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            duration_ms = (time.perf_counter() - started) * 1000
            if duration_ms > get_settings().api.slow_request_ms:
                log = logger.warning
            log(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
