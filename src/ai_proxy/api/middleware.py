"""Request tracing middleware.

Every log event emitted while a request is served carries its request_id,
method and path (structlog contextvars). The id is echoed back in the
X-Request-ID response header.
"""

import re
import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids end up in log lines; anything else is replaced
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# Scraped every few seconds, logged at debug only
PROBE_PATHS = frozenset({"/health", "/metrics"})


def resolve_request_id(request: Request) -> str:
    """Reuse a well-formed incoming X-Request-ID, else mint a UUID4."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind request context for logging and time each request. Query strings are never logged."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request)
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=path
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request crashed", duration_ms=elapsed_ms(started))
            structlog.contextvars.clear_contextvars()
            raise

        log = logger.debug if path in PROBE_PATHS else logger.info
        log("Request completed", status_code=response.status_code, duration_ms=elapsed_ms(started))

        response.headers[REQUEST_ID_HEADER] = request_id
        structlog.contextvars.clear_contextvars()
        return response


def elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
