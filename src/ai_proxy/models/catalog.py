"""
Static provider catalog: display names, models, free-tier limits and pricing.

The first model listed for a provider is its default model.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from ai_proxy.models.enums import ProviderIdentity


class ProviderLimits(BaseModel):
    """Free-tier quota of a provider (all optional, None = not published)."""
    model_config = ConfigDict(frozen=True)

    rpm: Optional[int] = Field(default=None, ge=0, description="Requests per minute")
    rpd: Optional[int] = Field(default=None, ge=0, description="Requests per day")
    tpm: Optional[int] = Field(default=None, ge=0, description="Tokens per minute")
    tpd: Optional[int] = Field(default=None, ge=0, description="Tokens per day")
    daily_token_limit: Optional[int] = Field(default=None, ge=0, description="Daily token cap")


class ProviderInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    models: tuple[str, ...]
    default_limits: ProviderLimits
    cost_per_1m_input: float = Field(..., ge=0.0)
    cost_per_1m_output: float = Field(..., ge=0.0)


PROVIDER_CATALOG: dict[ProviderIdentity, ProviderInfo] = {
    ProviderIdentity.GEMINI: ProviderInfo(
        name="Google Gemini",
        models=("gemini-2.5-flash-lite", "gemini-2.0-flash", "gemini-1.5-pro", "gemini-1.5-flash"),
        default_limits=ProviderLimits(rpm=15, rpd=1500, tpm=1_000_000, tpd=50_000_000),
        cost_per_1m_input=1.25,
        cost_per_1m_output=5.0,
    ),
    ProviderIdentity.GROQ: ProviderInfo(
        name="Groq Cloud",
        models=("llama-3.3-70b-versatile", "llama-3.1-8b-instant", "gemma2-9b-it"),
        default_limits=ProviderLimits(rpm=30, rpd=14400, tpm=6000, tpd=500_000),
        cost_per_1m_input=0.05,
        cost_per_1m_output=0.08,
    ),
    ProviderIdentity.CEREBRAS: ProviderInfo(
        name="Cerebras",
        models=("llama3.1-8b", "llama-3.3-70b"),
        default_limits=ProviderLimits(rpm=30, rpd=900, daily_token_limit=1_000_000),
        cost_per_1m_input=0.10,
        cost_per_1m_output=0.10,
    ),
}


def get_provider_info(provider: ProviderIdentity) -> ProviderInfo:
    return PROVIDER_CATALOG[provider]


def get_available_models(provider: ProviderIdentity) -> list[str]:
    """List the models offered for provider (empty for unknown providers)."""
    info = PROVIDER_CATALOG.get(provider)
    return list(info.models) if info else []


def get_default_model(provider: ProviderIdentity) -> str:
    models = get_available_models(provider)
    return models[0] if models else ""


def estimate_cost(provider: ProviderIdentity, input_tokens: int, output_tokens: int) -> float:
    """
    Simulated USD cost of a call at the provider's paid-tier prices.

    Args:
        provider: Provider whose pricing applies
        input_tokens: Prompt tokens
        output_tokens: Completion tokens

    Returns:
        Cost in USD (not rounded)
    """
    info = PROVIDER_CATALOG[provider]
    return (
        input_tokens / 1_000_000 * info.cost_per_1m_input
        + output_tokens / 1_000_000 * info.cost_per_1m_output
    )
