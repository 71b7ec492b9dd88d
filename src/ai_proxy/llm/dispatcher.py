"""
Provider dispatcher.

The only component that knows the full provider set. Routing is a lookup in a
registry built once at construction, so dispatching the same identity always
reaches the same adapter.
"""

from typing import Mapping, Optional

import structlog

from ai_proxy.config import Settings
from ai_proxy.llm.base_client import BaseProviderAdapter
from ai_proxy.llm.chat_completions_client import CerebrasClient, GroqClient
from ai_proxy.llm.credentials import CredentialStore
from ai_proxy.llm.exceptions import UnknownProvider
from ai_proxy.llm.gemini_client import GeminiClient
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationResult


logger = structlog.get_logger(__name__)


def build_default_adapters(settings: Settings) -> dict[ProviderIdentity, BaseProviderAdapter]:
    """Instantiate one adapter per provider identity from settings."""
    common = {
        "timeout": settings.REQUEST_TIMEOUT,
        "max_tokens": settings.LLM_MAX_TOKENS,
        "temperature": settings.LLM_TEMPERATURE,
    }
    return {
        ProviderIdentity.GEMINI: GeminiClient(base_url=settings.GEMINI_BASE_URL, **common),
        ProviderIdentity.GROQ: GroqClient(base_url=settings.GROQ_BASE_URL, **common),
        ProviderIdentity.CEREBRAS: CerebrasClient(base_url=settings.CEREBRAS_BASE_URL, **common),
    }


def resolve_provider(provider: "ProviderIdentity | str") -> ProviderIdentity:
    """Parse a raw provider identifier, raising UnknownProvider if it is not in the set."""
    try:
        return ProviderIdentity.parse(provider)
    except ValueError as e:
        raise UnknownProvider(
            f"Unknown provider: {provider}",
            details={"provider": str(provider), "known": [p.value for p in ProviderIdentity]},
        ) from e


class ProviderDispatcher:
    """
    Maps a provider identity to its adapter and delegates.

    Attributes:
        adapters: Registry of adapters keyed by identity
        credentials: Store consulted for each call's credential
    """

    def __init__(
        self,
        adapters: Mapping[ProviderIdentity, BaseProviderAdapter],
        credentials: CredentialStore,
    ):
        self.adapters = dict(adapters)
        self.credentials = credentials

        logger.info(
            "ProviderDispatcher initialized",
            providers=[p.value for p in self.adapters],
        )

    def supports(self, provider: "ProviderIdentity | str") -> bool:
        try:
            return ProviderIdentity.parse(provider) in self.adapters
        except ValueError:
            return False

    def get_adapter(self, provider: "ProviderIdentity | str") -> BaseProviderAdapter:
        """
        Return the adapter for provider.

        Raises:
            UnknownProvider: Identity is outside the fixed set or has no adapter
        """
        identity = resolve_provider(provider)
        adapter = self.adapters.get(identity)
        if adapter is None:
            raise UnknownProvider(
                f"No adapter registered for provider: {identity.value}",
                details={"provider": identity.value},
                provider=identity.value,
            )
        return adapter

    async def dispatch(
        self,
        prompt: str,
        provider: "ProviderIdentity | str",
        model: Optional[str] = None,
        credential: Optional[str] = None,
    ) -> GenerationResult:
        """
        Route one generation call to the adapter for provider.

        Args:
            prompt: Prompt text
            provider: Provider identity
            model: Model override, passed through unchanged
            credential: Explicit credential; the credential store is used when None

        Returns:
            The adapter's GenerationResult

        Raises:
            UnknownProvider: Before any outbound call is attempted
        """
        adapter = self.get_adapter(provider)
        if credential is None:
            credential = self.credentials.get_credential(adapter.provider)
        return await adapter.invoke(prompt, model, credential=credential)

    async def close(self):
        for adapter in self.adapters.values():
            await adapter.close()
