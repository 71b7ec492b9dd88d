"""
Provider adapters and routing.

Components:
- BaseProviderAdapter: Abstract base class for provider adapters
- GeminiClient: "candidates/parts" family adapter
- GroqClient, CerebrasClient: "choices/message" family adapters
- ProviderDispatcher: Routes a provider identity to its adapter
- CredentialStore: Per-call credential lookup
- exceptions: Provider-layer error taxonomy
"""

from ai_proxy.llm.base_client import BaseProviderAdapter
from ai_proxy.llm.gemini_client import GeminiClient
from ai_proxy.llm.chat_completions_client import (
    CerebrasClient,
    ChatCompletionsClient,
    GroqClient,
)
from ai_proxy.llm.credentials import (
    CredentialStore,
    SettingsCredentialStore,
    StaticCredentialStore,
)
from ai_proxy.llm.dispatcher import ProviderDispatcher, build_default_adapters
from ai_proxy.llm.exceptions import (
    LocalFailure,
    MissingCredential,
    ProviderError,
    RateLimited,
    UnknownProvider,
    UpstreamError,
    UpstreamRejected,
)

__all__ = [
    "BaseProviderAdapter",
    "GeminiClient",
    "ChatCompletionsClient",
    "GroqClient",
    "CerebrasClient",
    "CredentialStore",
    "SettingsCredentialStore",
    "StaticCredentialStore",
    "ProviderDispatcher",
    "build_default_adapters",
    "ProviderError",
    "UpstreamError",
    "RateLimited",
    "UpstreamRejected",
    "UnknownProvider",
    "LocalFailure",
    "MissingCredential",
]
