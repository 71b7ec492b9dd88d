"""Integration test fixtures.

The FastAPI app runs in-process with real adapters whose httpx clients are
wired to an httpx.MockTransport, so requests go through the full stack
(routing, dispatcher, retry, adapters, error handlers) without network access.
"""

from typing import Callable
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from ai_proxy.api.dependencies import (
    get_async_repository,
    get_credential_store,
    get_dispatcher,
    get_orchestrator,
)
from ai_proxy.llm.chat_completions_client import CerebrasClient, GroqClient
from ai_proxy.llm.credentials import StaticCredentialStore
from ai_proxy.llm.dispatcher import ProviderDispatcher
from ai_proxy.llm.gemini_client import GeminiClient
from ai_proxy.main import app
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.persistence.repository import AsyncUsageRepository
from ai_proxy.retry.controller import RetryController
from ai_proxy.retry.orchestrator import FallbackOrchestrator
from ai_proxy.retry.policy import RetryPolicy

Reply = Callable[[httpx.Request], httpx.Response]

HOSTS = {
    "gemini.test": ProviderIdentity.GEMINI,
    "groq.test": ProviderIdentity.GROQ,
    "cerebras.test": ProviderIdentity.CEREBRAS,
}


def gemini_ok(text: str = "Hello from gemini") -> Reply:
    return lambda request: httpx.Response(
        200,
        json={
            "candidates": [{"content": {"parts": [{"text": text}]}}],
            "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 12, "totalTokenCount": 17},
        },
    )


def chat_ok(text: str) -> Reply:
    return lambda request: httpx.Response(
        200,
        json={
            "choices": [{"message": {"role": "assistant", "content": text}}],
            "usage": {"prompt_tokens": 4, "completion_tokens": 6, "total_tokens": 10},
        },
    )


class FakeBackends:
    """Scripted provider backends keyed by provider.

    Each provider replays its list of reply factories; the last one repeats.
    Every request is recorded in `requests`.
    """

    def __init__(self):
        self.replies: dict[ProviderIdentity, list[Reply]] = {
            ProviderIdentity.GEMINI: [gemini_ok()],
            ProviderIdentity.GROQ: [chat_ok("Hello from groq")],
            ProviderIdentity.CEREBRAS: [chat_ok("Hello from cerebras")],
        }
        self.requests: list[tuple[ProviderIdentity, httpx.Request]] = []

    def script(self, provider: ProviderIdentity, *replies: Reply) -> None:
        self.replies[provider] = list(replies)

    @staticmethod
    def error(status_code: int, body: str = '{"error": "failed"}') -> Reply:
        return lambda request: httpx.Response(status_code, text=body)

    @staticmethod
    def ok(provider: ProviderIdentity, text: str) -> Reply:
        return gemini_ok(text) if provider == ProviderIdentity.GEMINI else chat_ok(text)

    def calls(self, provider: ProviderIdentity) -> list[httpx.Request]:
        return [request for p, request in self.requests if p == provider]

    def handler(self, request: httpx.Request) -> httpx.Response:
        provider = HOSTS[request.url.host]
        self.requests.append((provider, request))
        replies = self.replies[provider]
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        return reply(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def backends() -> FakeBackends:
    return FakeBackends()


@pytest.fixture
def mock_redis():
    mock = AsyncMock()
    mock.lpush = AsyncMock(return_value=1)
    mock.ltrim = AsyncMock(return_value=True)
    mock.expire = AsyncMock(return_value=True)
    mock.hincrby = AsyncMock(return_value=1)
    mock.hgetall = AsyncMock(return_value={})
    mock.lrange = AsyncMock(return_value=[])
    mock.ping = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def credentials() -> StaticCredentialStore:
    """Server-side keys for gemini and groq; cerebras is not configured."""
    return StaticCredentialStore({"gemini": "gemini-server-key", "groq": "groq-server-key"})


@pytest.fixture
def client(backends, mock_redis, credentials, test_settings):
    """TestClient with provider backends, Redis and retry sleeps replaced."""
    dispatcher = ProviderDispatcher(
        {
            ProviderIdentity.GEMINI: GeminiClient(base_url="https://gemini.test/v1beta", http_client=backends.client()),
            ProviderIdentity.GROQ: GroqClient(base_url="https://groq.test/openai/v1", http_client=backends.client()),
            ProviderIdentity.CEREBRAS: CerebrasClient(base_url="https://cerebras.test/v1", http_client=backends.client()),
        },
        credentials,
    )
    orchestrator = FallbackOrchestrator(
        dispatcher,
        ["gemini", "groq", "cerebras"],
        retry_policy=RetryPolicy(max_retries=3),
        retry_controller=RetryController(sleep=AsyncMock(), uniform=lambda a, b: 0.0),
    )
    repository = AsyncUsageRepository(mock_redis, test_settings)

    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_credential_store] = lambda: credentials
    app.dependency_overrides[get_async_repository] = lambda: repository
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
