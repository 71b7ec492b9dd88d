"""
Retry policy configuration.

A RetryPolicy has no identity or lifecycle beyond the call it governs.
"""

import random
from dataclasses import dataclass
from typing import Callable

from ai_proxy.config import Settings


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff for rate-limit errors.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_delay_ms: Delay before the first retry, doubled for each further retry
        max_jitter_ms: Upper bound of the additive uniform jitter
    """

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_jitter_ms: int = 1000

    def __post_init__(self) -> None:
        """Validate policy invariants."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        if self.base_delay_ms <= 0:
            raise ValueError("base_delay_ms must be > 0")

        if self.max_jitter_ms < 0:
            raise ValueError("max_jitter_ms must be >= 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.MAX_RETRIES,
            base_delay_ms=settings.RETRY_BASE_DELAY_MS,
            max_jitter_ms=settings.RETRY_MAX_JITTER_MS,
        )

    def delay_ms(
        self,
        attempt: int,
        uniform: Callable[[float, float], float] = random.uniform,
    ) -> float:
        """
        Backoff before the retry that follows a failed attempt.

        Args:
            attempt: 0-indexed number of the attempt that just failed
            uniform: Random source, uniform(a, b) -> float in [a, b]

        Returns:
            base_delay_ms * 2**attempt + uniform(0, max_jitter_ms)
        """
        return self.base_delay_ms * (2 ** attempt) + uniform(0, self.max_jitter_ms)
