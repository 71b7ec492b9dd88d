"""
Pydantic data models for the AI request proxy.

Includes:
- Enums (ProviderIdentity, UsageStatus)
- Generation models (GenerationRequest, GenerationResult)
- Provider catalog (ProviderInfo, ProviderLimits, PROVIDER_CATALOG)
- Usage models (QALog, UsageRecord, UsageSummary)
"""

from ai_proxy.models.enums import ProviderIdentity, UsageStatus
from ai_proxy.models.generation_models import GenerationRequest, GenerationResult
from ai_proxy.models.catalog import (
    PROVIDER_CATALOG,
    ProviderInfo,
    ProviderLimits,
    estimate_cost,
    get_available_models,
    get_default_model,
)
from ai_proxy.models.usage_models import (
    ProviderUsage,
    QALog,
    UsageRecord,
    UsageSummary,
    compute_usage_status,
)

__all__ = [
    # Enums
    "ProviderIdentity",
    "UsageStatus",
    # Generation models
    "GenerationRequest",
    "GenerationResult",
    # Catalog
    "PROVIDER_CATALOG",
    "ProviderInfo",
    "ProviderLimits",
    "estimate_cost",
    "get_available_models",
    "get_default_model",
    # Usage models
    "ProviderUsage",
    "QALog",
    "UsageRecord",
    "UsageSummary",
    "compute_usage_status",
]
