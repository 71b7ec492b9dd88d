"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from ai_proxy.config import Settings
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationRequest, GenerationResult


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 0
    """
    return Settings(
        # === Application ===
        APP_NAME="AI Request Proxy (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Providers ===
        GEMINI_BASE_URL="https://gemini.test/v1beta",
        GROQ_BASE_URL="https://groq.test/openai/v1",
        CEREBRAS_BASE_URL="https://cerebras.test/v1",
        REQUEST_TIMEOUT=5,
        GEMINI_API_KEY="gemini-test-key",
        GROQ_API_KEY="groq-test-key",
        CEREBRAS_API_KEY=None,

        # === Retry & Fallback ===
        MAX_RETRIES=3,
        RETRY_BASE_DELAY_MS=1000,
        RETRY_MAX_JITTER_MS=1000,
        FALLBACK_ORDER=["gemini", "groq", "cerebras"],

        # === Redis ===
        REDIS_URL="redis://localhost:6379/0",
        REDIS_MAX_CONNECTIONS=10,
        LOG_TTL_SECONDS=3600,
        QA_LOG_MAX_ENTRIES=100,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def sample_request() -> GenerationRequest:
    """Smart-call request with a preferred provider."""
    return GenerationRequest(prompt="Summarize the release notes", provider=ProviderIdentity.GROQ)


@pytest.fixture
def sample_result() -> GenerationResult:
    """Successful, non-fallback generation result."""
    return GenerationResult(
        text="Here is the summary.",
        provider=ProviderIdentity.GROQ,
        model="llama-3.3-70b-versatile",
        input_tokens=7,
        output_tokens=5,
        total_tokens=12,
        latency_ms=230,
    )
