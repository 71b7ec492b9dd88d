"""
Retry controller with exponential backoff for rate-limit errors.

Only rate-limit-class failures are retried; every other error propagates on
its first occurrence. The sleeper and the random source are injectable so
tests can simulate backoff without real elapsed time.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from ai_proxy.llm.exceptions import is_rate_limit_error
from ai_proxy.monitoring.metrics import retries_total
from ai_proxy.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


class RetryController:
    """
    Wraps an async operation with bounded backoff retry.

    Attributes:
        sleep: Awaitable sleeper taking seconds (asyncio.sleep by default)
        uniform: Jitter source, uniform(a, b) -> float
    """

    def __init__(
        self,
        sleep: Sleeper = asyncio.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ):
        self.sleep = sleep
        self.uniform = uniform

    async def with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: RetryPolicy,
        label: Optional[str] = None,
    ) -> T:
        """
        Run operation, retrying rate-limit errors up to policy.max_retries times.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt
            policy: Retry policy
            label: Name used in logs and metrics (typically the provider)

        Returns:
            The operation's result

        Raises:
            The original error: immediately for non-rate-limit errors, or the
            last rate-limit error after max_retries + 1 attempts
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as exc:
                if not is_rate_limit_error(exc):
                    raise
                if attempt >= policy.max_retries:
                    logger.warning(
                        "Rate limit retries exhausted",
                        target=label,
                        attempts=attempt + 1,
                    )
                    raise

                delay_ms = policy.delay_ms(attempt, self.uniform)
                logger.info(
                    "Rate limited, retrying",
                    target=label,
                    delay_ms=round(delay_ms),
                    attempt=attempt + 1,
                    max_retries=policy.max_retries,
                )
                retries_total.labels(provider=label or "unknown").inc()
                await self.sleep(delay_ms / 1000.0)
                attempt += 1
