"""
Custom exceptions for the provider layer.

These exceptions let the retry controller and the fallback orchestrator
distinguish failure modes:

- UpstreamError: non-2xx response from a backend
    - RateLimited: throttling (HTTP 429 or rate-limit markers), retried with backoff
    - UpstreamRejected: every other status, never retried
- UnknownProvider: identity with no adapter, always fatal
- LocalFailure: anything not originating from a backend response
    - MissingCredential: no credential configured for the selected provider
"""

import re
from typing import Optional

# "rate" as a standalone word or as the head of "rate_limit"/"RateLimit";
# "generate" or "separated" must not match.
RATE_LIMIT_MARKER = re.compile(r"(?<![A-Za-z])[Rr]ate(?![a-z])")

RATE_LIMIT_STATUS = 429


class ProviderError(Exception):
    """
    Base exception for all provider-layer errors.

    Carries a human-readable message plus a details dict that is safe to
    return to API callers (never contains credentials).
    """
    def __init__(
        self,
        message: str,
        details: dict | None = None,
        provider: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.provider = provider


class UpstreamError(ProviderError):
    """
    Raised when a backend answers with a non-2xx status.

    Use UpstreamError.from_response() to get the right subclass.
    """
    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        provider: Optional[str] = None,
        details: dict | None = None,
    ):
        super().__init__(message, details=details, provider=provider)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, provider: str, status_code: int, body: str) -> "UpstreamError":
        """Build a RateLimited or UpstreamRejected error from a raw response."""
        message = f"{provider} API error {status_code}: {body}"
        error_cls = RateLimited if is_rate_limit_signal(status_code, body) else UpstreamRejected
        return error_cls(
            message,
            status_code=status_code,
            body=body,
            provider=provider,
            details={"status": status_code, "body": body},
        )


class RateLimited(UpstreamError):
    """
    Backend throttled the request.

    The only error type eligible for exponential backoff retry.
    """
    pass


class UpstreamRejected(UpstreamError):
    """
    Backend rejected the request for any reason other than throttling
    (401 bad key, 400 bad model, 5xx outage...).

    Never retried; still eligible for fallback at the orchestrator level.
    """
    pass


class UnknownProvider(ProviderError):
    """
    Raised when a provider identity has no registered adapter.

    Always fatal: never retried and never fallen back from, since silent
    misrouting would corrupt usage accounting.
    """
    pass


class LocalFailure(ProviderError):
    """
    Raised for failures that did not come from a backend response:
    network errors, timeouts, invalid JSON, malformed local input.

    Treated like UpstreamRejected by the retry controller.
    """
    pass


class MissingCredential(LocalFailure):
    """No credential is available for the selected provider."""
    pass


def is_rate_limit_signal(status_code: Optional[int], text: str = "") -> bool:
    """True when a status code or error text indicates throttling."""
    if status_code == RATE_LIMIT_STATUS:
        return True
    return bool(text) and RATE_LIMIT_MARKER.search(text) is not None


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Classify an arbitrary exception as rate-limit class.

    Provider-layer errors are classified by type. Foreign exceptions fall back
    to a status_code attribute and their message text.
    """
    if isinstance(error, RateLimited):
        return True
    if isinstance(error, ProviderError):
        return False
    text = str(error)
    if str(RATE_LIMIT_STATUS) in text:
        return True
    return is_rate_limit_signal(getattr(error, "status_code", None), text)
