"""
Fallback attempt tracking.

Each failed provider attempt during a smart call is recorded as a
ProviderAttempt so AllProvidersFailed can report the complete history.
"""

from dataclasses import dataclass
from typing import Optional

from ai_proxy.llm.exceptions import ProviderError, UpstreamError
from ai_proxy.models.enums import ProviderIdentity


@dataclass(frozen=True)
class ProviderAttempt:
    """
    One failed provider attempt.

    Attributes:
        provider: Provider that was tried
        phase: "preferred" (with retry) or "fallback" (single call) or "sweep"
        error_type: Exception class name
        message: Error message
        status_code: Upstream HTTP status, None for local failures
    """

    provider: ProviderIdentity
    phase: str
    error_type: str
    message: str
    status_code: Optional[int] = None

    @classmethod
    def from_error(cls, provider: ProviderIdentity, phase: str, error: ProviderError) -> "ProviderAttempt":
        return cls(
            provider=provider,
            phase=phase,
            error_type=type(error).__name__,
            message=error.message,
            status_code=error.status_code if isinstance(error, UpstreamError) else None,
        )

    def to_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "phase": self.phase,
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
        }
