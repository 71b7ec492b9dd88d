"""
Abstract base adapter for text-generation providers.

Defines the interface every backend adapter (Gemini, Groq, Cerebras) must
implement. The dispatcher only ever sees this interface, so it stays agnostic
to which response family ("candidates/parts" or "choices/message") a backend
uses.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from ai_proxy.llm.exceptions import (
    LocalFailure,
    MissingCredential,
    RateLimited,
    UpstreamError,
    UpstreamRejected,
)
from ai_proxy.llm.text_utils import TokenUsage
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationResult
from ai_proxy.monitoring.metrics import (
    provider_latency_seconds,
    provider_requests_total,
    provider_tokens_total,
)


logger = structlog.get_logger(__name__)


# Keyword arguments for httpx.AsyncClient.post (url, params, headers, json)
WireRequest = Dict[str, Any]


class BaseProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    Responsibilities:
    - Translate (prompt, model) into the backend's wire request
    - Perform exactly one outbound HTTP call per invoke()
    - Translate the backend's wire response into a GenerationResult
    - Classify failures (RateLimited / UpstreamRejected / LocalFailure)

    Does NOT handle:
    - Retries (that's the retry controller's job)
    - Fallback to other providers (that's the orchestrator's job)
    - Credential lookup (credentials are passed in per call)
    """

    provider: ProviderIdentity
    default_model: str

    def __init__(
        self,
        base_url: str,
        timeout: int = 60,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        default_model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        connection_limits: Optional[httpx.Limits] = None,
    ):
        """
        Initialize base adapter.

        Args:
            base_url: Base URL of the provider API
            timeout: Request timeout in seconds
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            default_model: Overrides the class default model
            http_client: Pre-built client (tests inject one with a MockTransport)
            connection_limits: httpx connection pool limits
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        if default_model:
            self.default_model = default_model

        self._client = http_client
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0
        )

        logger.info(
            "Initialized provider adapter",
            provider=self.provider.value,
            base_url=self.base_url,
            default_model=self.default_model,
            timeout=timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
            )
            logger.debug("Created new httpx AsyncClient", provider=self.provider.value)
        return self._client

    @abstractmethod
    def build_request(self, prompt: str, model: str, credential: str) -> WireRequest:
        """
        Build the backend-specific request.

        Returns:
            WireRequest with url, headers, json and optionally params
        """

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        """Return the generated text, or None if the response lacks it."""

    @abstractmethod
    def extract_usage(self, prompt: str, text: str, data: Dict[str, Any]) -> TokenUsage:
        """Return normalized token usage (estimated where metadata is absent)."""

    async def invoke(
        self,
        prompt: str,
        model: Optional[str] = None,
        *,
        credential: Optional[str],
    ) -> GenerationResult:
        """
        Generate a completion with a single outbound call.

        Args:
            prompt: Prompt text
            model: Model override (adapter default when None)
            credential: Provider credential for this call

        Returns:
            GenerationResult with fallback_used=False

        Raises:
            MissingCredential: No credential supplied
            RateLimited: Backend throttled the request
            UpstreamRejected: Any other non-2xx status or unusable 2xx body
            LocalFailure: Network error, timeout or non-JSON body
        """
        provider = self.provider.value
        model = model or self.default_model
        if not credential or not credential.strip():
            provider_requests_total.labels(provider=provider, outcome="local_failure").inc()
            raise MissingCredential(
                f"No credential configured for provider {provider}",
                provider=provider,
            )

        wire = self.build_request(prompt, model, credential.strip())
        client = await self._get_client()

        logger.info(
            "Sending generation request",
            provider=provider,
            model=model,
            prompt_length=len(prompt),
        )

        start = time.perf_counter()
        try:
            response = await client.post(timeout=self.timeout, **wire)
        except httpx.TimeoutException as e:
            provider_requests_total.labels(provider=provider, outcome="local_failure").inc()
            raise LocalFailure(
                f"{provider} request timeout after {self.timeout}s",
                details={"error_type": type(e).__name__},
                provider=provider,
            ) from e
        except httpx.HTTPError as e:
            provider_requests_total.labels(provider=provider, outcome="local_failure").inc()
            raise LocalFailure(
                f"{provider} network error: {type(e).__name__}",
                details={"error_type": type(e).__name__},
                provider=provider,
            ) from e
        latency_ms = int((time.perf_counter() - start) * 1000)

        if not response.is_success:
            error = UpstreamError.from_response(provider, response.status_code, response.text)
            outcome = "rate_limited" if isinstance(error, RateLimited) else "rejected"
            provider_requests_total.labels(provider=provider, outcome=outcome).inc()
            logger.warning(
                "Provider returned error status",
                provider=provider,
                model=model,
                status_code=response.status_code,
                error_class=type(error).__name__,
            )
            raise error

        try:
            data = response.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError (undecodable body) alike
            provider_requests_total.labels(provider=provider, outcome="local_failure").inc()
            raise LocalFailure(
                f"Invalid JSON response from {provider}",
                details={"parse_error": str(e)},
                provider=provider,
            ) from e

        text = self.extract_text(data) if isinstance(data, dict) else None
        if text is None:
            provider_requests_total.labels(provider=provider, outcome="rejected").inc()
            raise UpstreamRejected(
                f"{provider} response has no generated text",
                status_code=response.status_code,
                body=response.text,
                provider=provider,
                details={"status": response.status_code, "body": response.text},
            )

        usage = self.extract_usage(prompt, text, data)

        provider_requests_total.labels(provider=provider, outcome="success").inc()
        provider_latency_seconds.labels(provider=provider).observe(latency_ms / 1000.0)
        provider_tokens_total.labels(provider=provider, token_type="input").inc(usage.input_tokens)
        provider_tokens_total.labels(provider=provider, token_type="output").inc(usage.output_tokens)

        logger.info(
            "Provider generation successful",
            provider=provider,
            model=model,
            latency_ms=latency_ms,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            tokens_estimated=usage.estimated,
        )

        return GenerationResult(
            text=text,
            provider=self.provider,
            model=model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            latency_ms=latency_ms,
            tokens_estimated=usage.estimated,
        )

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed provider client connection", provider=self.provider.value)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"default_model={self.default_model})"
        )
