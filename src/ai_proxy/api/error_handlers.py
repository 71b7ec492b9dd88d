"""
FastAPI exception handlers for structured error responses.

Maps provider-layer exceptions to HTTP status codes. Every error body has the
shape {"error": {"message": ..., "details": ...}}; details is omitted when
there is nothing to add.
"""

import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ai_proxy.llm.exceptions import (
    LocalFailure,
    ProviderError,
    UnknownProvider,
    UpstreamError,
)
from ai_proxy.retry.exceptions import AllProvidersFailed

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, details: Optional[dict[str, Any]] = None
) -> JSONResponse:
    error: dict[str, Any] = {"message": message}
    if details:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"error": error})


def upstream_status(exc: UpstreamError) -> int:
    """The backend's status when it is an error status, else 502."""
    if 400 <= exc.status_code <= 599:
        return exc.status_code
    return status.HTTP_502_BAD_GATEWAY


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Handle non-2xx backend responses.

    Mirrors the upstream status (429 stays 429, 401 stays 401).
    """
    logger.warning(
        "Upstream error",
        extra={
            "provider": exc.provider,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return error_response(upstream_status(exc), exc.message, exc.details)


async def unknown_provider_handler(request: Request, exc: UnknownProvider) -> JSONResponse:
    logger.warning("Unknown provider", extra={"details": exc.details})
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)


async def all_providers_failed_handler(request: Request, exc: AllProvidersFailed) -> JSONResponse:
    """
    Handle exhausted fallback.

    Uses the status of the wrapped upstream error when there is one, else 503.
    """
    logger.error(
        "All providers failed",
        extra={
            "attempts": len(exc.attempts),
            "last_error": str(exc.last_error) if exc.last_error else None,
        },
    )
    if isinstance(exc.last_error, UpstreamError):
        status_code = upstream_status(exc.last_error)
    else:
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return error_response(status_code, exc.message, exc.details)


async def local_failure_handler(request: Request, exc: LocalFailure) -> JSONResponse:
    """
    Handle failures that never produced a backend response.

    Maps to 502 Bad Gateway (transport, timeout, unparseable body, no credential).
    """
    logger.error(
        "Local failure",
        extra={"provider": exc.provider, "error_type": type(exc).__name__, "error": exc.message},
    )
    return error_response(status.HTTP_502_BAD_GATEWAY, exc.message, exc.details)


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error("Provider error", extra={"error_type": type(exc).__name__})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc.details)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies.

    Maps to 400 Bad Request (client error).
    """
    logger.warning("Invalid request format", extra={"errors": exc.errors()})
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed",
        {"errors": exc.errors()},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        extra={"error_type": type(exc).__name__},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
# Lookup follows the exception's MRO, so subclasses resolve to their own entry.
EXCEPTION_HANDLERS = {
    UpstreamError: upstream_error_handler,
    UnknownProvider: unknown_provider_handler,
    AllProvidersFailed: all_providers_failed_handler,
    LocalFailure: local_failure_handler,
    ProviderError: provider_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
