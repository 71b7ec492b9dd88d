"""
Retry and fallback.

This package implements the failure handling around provider calls:

1. **Retry Controller**: Exponential backoff with jitter, rate-limit errors only
2. **Fallback Orchestrator**: Preferred provider with retry, then each
   remaining provider once in a fixed order
3. **AllProvidersFailed**: Raised with the complete attempt history when no
   provider could answer

Main Components:
    - RetryPolicy: max_retries / base_delay_ms / max_jitter_ms
    - RetryController: Runs an operation under a policy
    - FallbackOrchestrator: smart_call() entry point
    - ProviderAttempt: Record of one failed attempt

Usage:
    >>> from ai_proxy.retry import FallbackOrchestrator
    >>> orchestrator = FallbackOrchestrator(dispatcher, ["gemini", "groq", "cerebras"])
    >>> result = await orchestrator.smart_call(GenerationRequest(prompt="Hi", provider="groq"))
"""

from ai_proxy.retry.controller import RetryController
from ai_proxy.retry.exceptions import AllProvidersFailed
from ai_proxy.retry.metadata import ProviderAttempt
from ai_proxy.retry.orchestrator import FallbackOrchestrator
from ai_proxy.retry.policy import RetryPolicy

__all__ = [
    "AllProvidersFailed",
    "FallbackOrchestrator",
    "ProviderAttempt",
    "RetryController",
    "RetryPolicy",
]
