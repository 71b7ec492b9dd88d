"""
API-specific request and response models for FastAPI endpoints.

Response bodies use camelCase field names (the shape existing dashboard
clients read); request bodies accept either spelling.
"""

from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ai_proxy.models.catalog import ProviderLimits
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationResult
from ai_proxy.models.usage_models import QALog, UsageRecord, UsageSummary


CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelModel(BaseModel):
    model_config = CAMEL_CONFIG


# Domain models re-exposed with camelCase aliases, so nested objects match
# the envelope they are returned in. Build them with camel_view().


class LimitsEntry(ProviderLimits):
    model_config = CAMEL_CONFIG


class QALogEntry(QALog):
    model_config = CAMEL_CONFIG


class UsageRecordEntry(UsageRecord):
    model_config = CAMEL_CONFIG


class UsageSummaryEntry(UsageSummary):
    model_config = CAMEL_CONFIG

    limits: LimitsEntry


ViewT = TypeVar("ViewT", bound=BaseModel)


def camel_view(view: type[ViewT], model: BaseModel) -> ViewT:
    """Copy a domain model into its camelCase API counterpart."""
    return view.model_validate(model.model_dump())


class ValidateRequest(CamelModel):
    """Single-call request: one dispatch with a caller-supplied credential."""

    provider: str = Field(description="Provider identity", examples=["gemini", "groq", "cerebras"])
    key: str = Field(
        min_length=1,
        validation_alias=AliasChoices("key", "credential"),
        description="Provider API key, used for this call only and never stored",
    )
    model: Optional[str] = Field(default=None, description="Model override (provider default if omitted)")
    prompt: Optional[str] = Field(default=None, description="Prompt text (a short ping prompt if omitted)")


class GenerationBody(CamelModel):
    """Normalized generation result as returned to API callers."""

    text: str
    provider: ProviderIdentity
    model: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    latency_ms: int
    fallback_used: bool = False
    fallback_from: Optional[ProviderIdentity] = None
    tokens_estimated: bool = False
    estimated_cost_usd: float = Field(default=0.0, description="Cost at the provider's paid-tier prices")

    @classmethod
    def from_result(cls, result: GenerationResult, estimated_cost_usd: float = 0.0, **extra: Any):
        return cls(**result.model_dump(), estimated_cost_usd=estimated_cost_usd, **extra)


class ValidateResponse(GenerationBody):
    success: bool = True


class GenerateRequest(CamelModel):
    """Smart-call request: preferred provider with retry, then fallback."""

    prompt: str = Field(min_length=1, description="Prompt text")
    provider: Optional[str] = Field(default=None, description="Preferred provider (fallback order if omitted)")
    model: Optional[str] = Field(default=None, description="Model override for the preferred provider")
    project_id: Optional[str] = Field(default=None, description="Project the call is attributed to")


class GenerateResponse(GenerationBody):
    log_id: Optional[str] = Field(default=None, description="Id of the stored QA log (None if storage failed)")


class ErrorBody(BaseModel):
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: ErrorBody


class ProviderEntry(CamelModel):
    provider: ProviderIdentity
    name: str
    models: list[str]
    default_model: str
    limits: LimitsEntry
    cost_per_1m_input: float
    cost_per_1m_output: float
    configured: bool = Field(description="Whether a server-side credential is configured")


class ProvidersResponse(CamelModel):
    providers: list[ProviderEntry]
    fallback_order: list[ProviderIdentity]


class UsageResponse(CamelModel):
    date: str
    providers: list[UsageSummaryEntry]


class QALogsResponse(CamelModel):
    count: int
    logs: list[QALogEntry]


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded", "unhealthy"],
    )
    version: str = Field(description="Proxy version")
    services: dict[str, str] = Field(description="Status of each dependency")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
