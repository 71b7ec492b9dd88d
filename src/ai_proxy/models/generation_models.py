"""
Provider-agnostic request/response models for text generation.

Every adapter, whatever its backend's wire schema, produces a
GenerationResult. These models are transient: built per call and discarded
once the caller has consumed the result.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator

from ai_proxy.models.enums import ProviderIdentity


class GenerationRequest(BaseModel):
    """
    Input to the fallback orchestrator.

    If provider is omitted the orchestrator walks the fallback order from the
    start. If model is omitted each adapter supplies its own default model.
    Non-empty prompt validation is the caller's responsibility.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Prompt text sent as a single user message")
    provider: Optional[ProviderIdentity] = Field(
        default=None,
        description="Preferred provider; None lets the orchestrator choose"
    )
    model: Optional[str] = Field(default=None, description="Model override for the preferred provider")
    project_id: Optional[str] = Field(
        default=None,
        description="Project the call is attributed to (usage recording only)"
    )


class GenerationResult(BaseModel):
    """
    Normalized generation result.

    Token counts come from the backend's usage metadata when present. When a
    backend omits it, counts are estimated as ceil(chars / 4) and
    tokens_estimated is set so consumers can tell measured from estimated.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Generated text")
    provider: ProviderIdentity = Field(..., description="Provider that actually produced the answer")
    model: str = Field(..., description="Model used for generation")
    input_tokens: int = Field(..., ge=0, description="Prompt tokens")
    output_tokens: int = Field(..., ge=0, description="Completion tokens")
    total_tokens: int = Field(..., ge=0, description="Backend-reported total, else input + output")
    latency_ms: int = Field(..., ge=0, description="Wall-clock time of the successful call only")
    fallback_used: bool = Field(default=False, description="Whether a provider other than the first choice answered")
    fallback_from: Optional[ProviderIdentity] = Field(
        default=None,
        description="Provider that was preferred but failed (set iff fallback_used)"
    )
    tokens_estimated: bool = Field(
        default=False,
        description="True when any token count is a chars/4 estimate"
    )

    @model_validator(mode="after")
    def _check_fallback_attribution(self) -> "GenerationResult":
        if self.fallback_used != (self.fallback_from is not None):
            raise ValueError("fallback_from must be set if and only if fallback_used is true")
        return self

    def with_fallback(self, fallback_from: ProviderIdentity) -> "GenerationResult":
        """Return a copy attributed as a fallback answer for fallback_from."""
        return self.model_copy(update={"fallback_used": True, "fallback_from": fallback_from})
