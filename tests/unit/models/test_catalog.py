"""Unit tests for the static provider catalog."""

import pytest

from ai_proxy.llm.chat_completions_client import CerebrasClient, GroqClient
from ai_proxy.llm.gemini_client import GeminiClient
from ai_proxy.models.catalog import (
    PROVIDER_CATALOG,
    estimate_cost,
    get_available_models,
    get_default_model,
    get_provider_info,
)
from ai_proxy.models.enums import ProviderIdentity


def test_every_provider_has_an_entry():
    assert set(PROVIDER_CATALOG) == set(ProviderIdentity)


@pytest.mark.parametrize(
    "adapter_cls", [GeminiClient, GroqClient, CerebrasClient]
)
def test_default_model_matches_adapter_default(adapter_cls):
    assert get_default_model(adapter_cls.provider) == adapter_cls.default_model


def test_available_models_is_a_fresh_list():
    models = get_available_models(ProviderIdentity.GROQ)
    models.append("mutated")

    assert "mutated" not in get_available_models(ProviderIdentity.GROQ)


def test_unknown_provider_has_no_models():
    assert get_available_models("openai") == []
    assert get_default_model("openai") == ""


def test_cerebras_limits_use_daily_token_cap():
    limits = get_provider_info(ProviderIdentity.CEREBRAS).default_limits

    assert limits.rpd == 900
    assert limits.daily_token_limit == 1_000_000
    assert limits.tpd is None


def test_estimate_cost():
    # 1M input at $1.25 + 0.5M output at $5.00
    assert estimate_cost(ProviderIdentity.GEMINI, 1_000_000, 500_000) == pytest.approx(3.75)
    assert estimate_cost(ProviderIdentity.GROQ, 0, 0) == 0.0


def test_catalog_entries_are_frozen():
    info = get_provider_info(ProviderIdentity.GEMINI)
    with pytest.raises(Exception):
        info.name = "changed"
