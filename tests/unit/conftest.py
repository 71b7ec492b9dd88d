"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from ai_proxy.llm.base_client import BaseProviderAdapter, WireRequest
from ai_proxy.llm.credentials import StaticCredentialStore
from ai_proxy.llm.dispatcher import ProviderDispatcher
from ai_proxy.llm.exceptions import UpstreamError
from ai_proxy.llm.text_utils import TokenUsage, normalize_usage
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationResult
from ai_proxy.retry.controller import RetryController


class ScriptedAdapter(BaseProviderAdapter):
    """Adapter that replays scripted outcomes instead of calling a backend.

    Each outcome is either an exception (raised) or a string (returned as the
    generated text). The last outcome repeats once the script is exhausted.
    """

    default_model = "scripted-model"

    def __init__(self, provider: ProviderIdentity, outcomes: Optional[list[Any]] = None):
        self.provider = provider
        super().__init__(base_url=f"https://{provider.value}.test")
        self.outcomes = list(outcomes or [f"answer from {provider.value}"])
        self.calls: list[dict] = []

    def build_request(self, prompt: str, model: str, credential: str) -> WireRequest:
        return {"url": self.base_url}

    def extract_text(self, data: dict) -> Optional[str]:
        return None

    def extract_usage(self, prompt: str, text: str, data: dict) -> TokenUsage:
        return normalize_usage(prompt, text)

    async def invoke(self, prompt: str, model: Optional[str] = None, *, credential: Optional[str]):
        self.calls.append({"prompt": prompt, "model": model, "credential": credential})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        usage = self.extract_usage(prompt, outcome, {})
        return GenerationResult(
            text=outcome,
            provider=self.provider,
            model=model or self.default_model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            latency_ms=10,
            tokens_estimated=usage.estimated,
        )


@pytest.fixture
def rate_limited():
    """Factory for a RateLimited error as an adapter would raise it (HTTP 429)."""

    def _make(provider: str = "gemini") -> UpstreamError:
        return UpstreamError.from_response(provider, 429, '{"error": "Too Many Requests"}')

    return _make


@pytest.fixture
def rejected():
    """Factory for an UpstreamRejected error (401 bad key by default)."""

    def _make(provider: str = "gemini", status_code: int = 401) -> UpstreamError:
        return UpstreamError.from_response(provider, status_code, '{"error": "invalid api key"}')

    return _make


@pytest.fixture
def make_dispatcher():
    """Factory: make_dispatcher(gemini=[...], groq=[...]) -> (dispatcher, adapters).

    Providers not named get an adapter that always succeeds.
    """

    def _make(**outcomes):
        adapters = {
            provider: ScriptedAdapter(provider, outcomes.get(provider.value))
            for provider in ProviderIdentity
        }
        credentials = StaticCredentialStore({provider: f"{provider.value}-key" for provider in ProviderIdentity})
        return ProviderDispatcher(adapters, credentials), adapters

    return _make


@pytest.fixture
def mock_sleep():
    """Sleeper that records requested delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def instant_retry_controller(mock_sleep):
    """RetryController with no real waiting and zero jitter."""
    return RetryController(sleep=mock_sleep, uniform=lambda a, b: 0.0)


@pytest.fixture
def mock_async_redis():
    """Mock AsyncRedis client for unit tests (async)."""
    mock = AsyncMock()
    mock.lpush = AsyncMock(return_value=1)
    mock.ltrim = AsyncMock(return_value=True)
    mock.lrange = AsyncMock(return_value=[])
    mock.expire = AsyncMock(return_value=True)
    mock.hincrby = AsyncMock(return_value=1)
    mock.hgetall = AsyncMock(return_value={})
    mock.ping = AsyncMock(return_value=True)
    return mock
