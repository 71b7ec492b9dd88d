"""
Fallback orchestrator: the public smart-call entry point.

State machine (per call, nothing persisted across calls):

    Preferred-Attempt  (only when request.provider is set)
        with_retry(dispatch(preferred, model))
        success -> Done (fallback_used=False)
        failure -> Fallback-Sweep
    Fallback-Sweep
        preferred set:   each remaining provider once, no retry
        preferred unset: each provider in order, with retry
        first success -> Done (fallback_used only when a preference was set)
        all fail      -> AllProvidersFailed

UnknownProvider is never retried and never fallen back from.
"""

from functools import partial
from typing import Iterable, Optional

import structlog

from ai_proxy.llm.dispatcher import ProviderDispatcher, resolve_provider
from ai_proxy.llm.exceptions import ProviderError, UnknownProvider
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationRequest, GenerationResult
from ai_proxy.monitoring.metrics import all_providers_failed_total, fallbacks_total
from ai_proxy.retry.controller import RetryController
from ai_proxy.retry.exceptions import AllProvidersFailed
from ai_proxy.retry.metadata import ProviderAttempt
from ai_proxy.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class FallbackOrchestrator:
    """
    Tries the requested provider with retry, then falls back in a fixed order.

    The fallback order is configured once at construction and is never
    reprioritized from historical success or failure.

    Attributes:
        dispatcher: Provider dispatcher
        fallback_order: Total order over the provider set
        retry_policy: Policy applied to retried attempts
        retry_controller: Backoff executor (injectable clock/jitter)
    """

    def __init__(
        self,
        dispatcher: ProviderDispatcher,
        fallback_order: Iterable["ProviderIdentity | str"],
        retry_policy: Optional[RetryPolicy] = None,
        retry_controller: Optional[RetryController] = None,
    ):
        """
        Initialize orchestrator.

        Raises:
            UnknownProvider: An identity in fallback_order has no adapter
        """
        order: list[ProviderIdentity] = []
        for raw in fallback_order:
            identity = resolve_provider(raw)
            if not dispatcher.supports(identity):
                raise UnknownProvider(
                    f"Fallback order names provider without adapter: {identity.value}",
                    details={"provider": identity.value},
                    provider=identity.value,
                )
            if identity not in order:
                order.append(identity)

        self.dispatcher = dispatcher
        self.fallback_order: tuple[ProviderIdentity, ...] = tuple(order)
        self.retry_policy = retry_policy or RetryPolicy()
        self.retry_controller = retry_controller or RetryController()

        logger.info(
            "FallbackOrchestrator initialized",
            fallback_order=[p.value for p in self.fallback_order],
            max_retries=self.retry_policy.max_retries,
            base_delay_ms=self.retry_policy.base_delay_ms,
        )

    async def _call_with_retry(
        self, prompt: str, provider: ProviderIdentity, model: Optional[str]
    ) -> GenerationResult:
        return await self.retry_controller.with_retry(
            partial(self.dispatcher.dispatch, prompt, provider, model),
            self.retry_policy,
            label=provider.value,
        )

    async def smart_call(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate a completion, falling back across providers on failure.

        Args:
            request: Prompt plus optional preferred provider and model

        Returns:
            GenerationResult; fallback_used/fallback_from are set when the
            preferred provider failed and another one answered

        Raises:
            UnknownProvider: Preferred provider has no adapter (no call made)
            AllProvidersFailed: Every candidate failed
        """
        if request.provider is not None:
            return await self._preferred_then_fallback(request, request.provider)
        return await self._sweep_in_order(request)

    async def _preferred_then_fallback(
        self, request: GenerationRequest, preferred: ProviderIdentity
    ) -> GenerationResult:
        if not self.dispatcher.supports(preferred):
            raise UnknownProvider(
                f"Unknown provider: {preferred.value}",
                details={"provider": preferred.value},
                provider=preferred.value,
            )

        attempts: list[ProviderAttempt] = []
        try:
            return await self._call_with_retry(request.prompt, preferred, request.model)
        except UnknownProvider:
            raise
        except ProviderError as exc:
            preferred_error = exc
            attempts.append(ProviderAttempt.from_error(preferred, "preferred", exc))
            logger.warning(
                "Preferred provider failed, attempting fallback",
                provider=preferred.value,
                error_type=type(exc).__name__,
                error=exc.message,
            )

        # Model names are provider-specific; fallback candidates use their defaults
        for candidate in self.fallback_order:
            if candidate == preferred:
                continue
            try:
                result = await self.dispatcher.dispatch(request.prompt, candidate)
            except UnknownProvider:
                raise
            except ProviderError as exc:
                attempts.append(ProviderAttempt.from_error(candidate, "fallback", exc))
                logger.warning(
                    "Fallback provider also failed",
                    provider=candidate.value,
                    error_type=type(exc).__name__,
                    error=exc.message,
                )
                continue

            fallbacks_total.labels(from_provider=preferred.value, to_provider=candidate.value).inc()
            logger.info(
                "Fallback succeeded",
                fallback_from=preferred.value,
                provider=candidate.value,
            )
            return result.with_fallback(preferred)

        all_providers_failed_total.inc()
        logger.error(
            "All providers failed",
            preferred=preferred.value,
            attempts=[a.to_dict() for a in attempts],
        )
        raise AllProvidersFailed(preferred_error, attempts) from preferred_error

    async def _sweep_in_order(self, request: GenerationRequest) -> GenerationResult:
        if request.model:
            logger.debug("Model override ignored without a preferred provider", model=request.model)

        attempts: list[ProviderAttempt] = []
        last_error: Optional[ProviderError] = None
        first_choice = self.fallback_order[0] if self.fallback_order else None

        for candidate in self.fallback_order:
            try:
                result = await self._call_with_retry(request.prompt, candidate, None)
            except UnknownProvider:
                raise
            except ProviderError as exc:
                last_error = exc
                attempts.append(ProviderAttempt.from_error(candidate, "sweep", exc))
                logger.warning(
                    "Provider failed during sweep",
                    provider=candidate.value,
                    error_type=type(exc).__name__,
                    error=exc.message,
                )
                continue

            # No preference was expressed, so the result is not attributed as a fallback
            if candidate != first_choice:
                fallbacks_total.labels(from_provider=first_choice.value, to_provider=candidate.value).inc()
            return result

        all_providers_failed_total.inc()
        logger.error(
            "All providers failed",
            preferred=None,
            attempts=[a.to_dict() for a in attempts],
        )
        if last_error is None:
            raise AllProvidersFailed(None, attempts)
        raise AllProvidersFailed(last_error, attempts) from last_error
