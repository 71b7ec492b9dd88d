"""
Unit tests for the chat completions adapters (Groq, Cerebras).
"""

import json

import httpx
import pytest

from ai_proxy.llm.chat_completions_client import CerebrasClient, GroqClient
from ai_proxy.llm.exceptions import LocalFailure, RateLimited, UpstreamRejected
from ai_proxy.models.enums import ProviderIdentity


def chat_body(content="Hello there", usage=None) -> dict:
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_groq_request_uses_bearer_token_and_chat_body():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=chat_body())

    client = GroqClient(base_url="https://groq.test/openai/v1", http_client=mock_client(handler))
    await client.invoke("Hi", credential="gsk-123")

    assert captured["url"] == "https://groq.test/openai/v1/chat/completions"
    assert captured["auth"] == "Bearer gsk-123"
    assert captured["body"] == {
        "model": "llama-3.3-70b-versatile",
        "messages": [{"role": "user", "content": "Hi"}],
        "max_tokens": 2048,
        "temperature": 0.7,
    }


@pytest.mark.asyncio
async def test_credential_is_trimmed():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer gsk-123"
        return httpx.Response(200, json=chat_body())

    client = GroqClient(http_client=mock_client(handler))
    await client.invoke("Hi", credential="  gsk-123\n")


@pytest.mark.asyncio
async def test_cerebras_defaults():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "api.cerebras.ai"
        assert json.loads(request.content)["model"] == "llama3.1-8b"
        return httpx.Response(200, json=chat_body("pong"))

    result = await CerebrasClient(http_client=mock_client(handler)).invoke("ping", credential="csk")

    assert result.provider == ProviderIdentity.CEREBRAS
    assert result.model == "llama3.1-8b"
    assert result.text == "pong"


@pytest.mark.asyncio
async def test_reported_usage_is_used():
    usage = {"prompt_tokens": 5, "completion_tokens": 12, "total_tokens": 17}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=chat_body("Hello there", usage))

    result = await GroqClient(http_client=mock_client(handler)).invoke("Hi", credential="k")

    assert (result.input_tokens, result.output_tokens, result.total_tokens) == (5, 12, 17)
    assert result.tokens_estimated is False


@pytest.mark.asyncio
async def test_partial_usage_estimates_only_missing_counts():
    """A reported total wins even when the completion count is estimated."""
    usage = {"prompt_tokens": 9, "total_tokens": 40}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=chat_body("12345678", usage))

    result = await GroqClient(http_client=mock_client(handler)).invoke("Hi", credential="k")

    assert result.input_tokens == 9
    assert result.output_tokens == 2
    assert result.total_tokens == 40
    assert result.tokens_estimated is True


@pytest.mark.asyncio
async def test_null_content_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": None}}]})

    with pytest.raises(UpstreamRejected):
        await GroqClient(http_client=mock_client(handler)).invoke("Hi", credential="k")


@pytest.mark.asyncio
async def test_429_is_rate_limited():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Too many requests"}})

    with pytest.raises(RateLimited):
        await GroqClient(http_client=mock_client(handler)).invoke("Hi", credential="k")


@pytest.mark.asyncio
async def test_word_containing_rate_is_not_rate_limited():
    """'generate' contains 'rate' but is not a throttling signal."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="Failed to generate: model not found")

    with pytest.raises(UpstreamRejected) as exc_info:
        await CerebrasClient(http_client=mock_client(handler)).invoke("Hi", credential="k")

    assert not isinstance(exc_info.value, RateLimited)
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_undecodable_body_raises_local_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'{"choices": "\xff\xfe"}')

    client = GroqClient(base_url="https://groq.test/openai/v1", http_client=mock_client(handler))

    with pytest.raises(LocalFailure):
        await client.invoke("Hi", credential="gsk-123")
