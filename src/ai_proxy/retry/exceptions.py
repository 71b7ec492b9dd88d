"""
Fallback orchestrator exceptions.
"""

from typing import Optional, TYPE_CHECKING

from ai_proxy.llm.exceptions import ProviderError

if TYPE_CHECKING:
    from ai_proxy.retry.metadata import ProviderAttempt


class AllProvidersFailed(ProviderError):
    """
    Raised when no candidate provider produced a result.

    Attributes:
        last_error: The most informative underlying error (the preferred
            provider's error when one was requested, otherwise the last
            error of the sweep); None when no attempt ran at all
        attempts: Every failed attempt, in order
    """

    def __init__(
        self,
        last_error: Optional[ProviderError],
        attempts: Optional[list["ProviderAttempt"]] = None,
    ) -> None:
        self.last_error = last_error
        self.attempts = list(attempts or [])

        if last_error is None:
            message = "All providers failed"
        else:
            message = (
                f"All providers failed after {len(self.attempts)} attempts. "
                f"Reported error: {last_error.message}"
            )
        super().__init__(
            message,
            details={"attempts": [a.to_dict() for a in self.attempts]},
            provider=last_error.provider if last_error else None,
        )
