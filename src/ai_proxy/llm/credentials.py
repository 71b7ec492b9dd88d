"""
Credential stores.

The proxy never embeds provider secrets: the dispatcher asks a store for the
credential of the selected provider right before each call. A store returns
None when no credential is configured, which fails only that provider.
"""

from typing import Mapping, Optional, Protocol

from ai_proxy.config import Settings
from ai_proxy.models.enums import ProviderIdentity


class CredentialStore(Protocol):
    """Read-only source of provider credentials."""

    def get_credential(self, provider: ProviderIdentity) -> Optional[str]:
        ...


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class StaticCredentialStore:
    """Credentials from an explicit mapping (per-request keys, tests)."""

    def __init__(self, credentials: Mapping[ProviderIdentity, Optional[str]] | None = None):
        self._credentials = {
            ProviderIdentity.parse(provider): _clean(value)
            for provider, value in (credentials or {}).items()
        }

    def get_credential(self, provider: ProviderIdentity) -> Optional[str]:
        return self._credentials.get(provider)


class SettingsCredentialStore:
    """Credentials from GEMINI_API_KEY / GROQ_API_KEY / CEREBRAS_API_KEY settings."""

    _FIELDS = {
        ProviderIdentity.GEMINI: "GEMINI_API_KEY",
        ProviderIdentity.GROQ: "GROQ_API_KEY",
        ProviderIdentity.CEREBRAS: "CEREBRAS_API_KEY",
    }

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_credential(self, provider: ProviderIdentity) -> Optional[str]:
        field = self._FIELDS.get(provider)
        if field is None:
            return None
        return _clean(getattr(self.settings, field, None))
