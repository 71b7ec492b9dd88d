"""
Usage accounting records.

QALog and UsageRecord are what the proxy hands to the persistence layer after
a successful call. UsageSummary is the per-provider daily view built from
stored UsageRecords.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field

from ai_proxy.models.catalog import ProviderLimits
from ai_proxy.models.enums import ProviderIdentity, UsageStatus


WARNING_RATIO = 0.7


def utc_today() -> str:
    """Current UTC date as YYYY-MM-DD (usage records are bucketed by it)."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class QALog(BaseModel):
    """One prompt/response pair with its accounting metadata."""

    id: Optional[str] = Field(default=None, description="Storage id (assigned on append)")
    project_id: str = Field(default="unassigned", description="Project the call belongs to")
    provider: ProviderIdentity
    model: str
    prompt: str
    response: str
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)
    latency_ms: int = Field(..., ge=0)
    has_sensitive_data: bool = False
    fallback_used: bool = False
    fallback_from: Optional[ProviderIdentity] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UsageRecord(BaseModel):
    """Request/token counter increment for one provider on one day."""

    id: Optional[str] = None
    provider: ProviderIdentity
    date: str = Field(default_factory=utc_today, pattern=r"^\d{4}-\d{2}-\d{2}$")
    request_count: int = Field(default=1, ge=0)
    token_count: int = Field(default=0, ge=0)
    project_id: Optional[str] = None


class ProviderUsage(BaseModel):
    requests: int = 0
    tokens: int = 0


class UsageSummary(BaseModel):
    provider: ProviderIdentity
    today_requests: int
    today_tokens: int
    limits: ProviderLimits
    status: UsageStatus


def compute_usage_status(limits: ProviderLimits, usage: ProviderUsage) -> UsageStatus:
    """
    Classify today's usage against the provider's daily quota.

    The request quota (rpd) is used when published, otherwise the daily token
    cap. No quota at all means the provider is always NORMAL.
    """
    if limits.rpd:
        ratio = usage.requests / limits.rpd
    elif limits.daily_token_limit:
        ratio = usage.tokens / limits.daily_token_limit
    else:
        return UsageStatus.NORMAL

    if ratio >= 1:
        return UsageStatus.EXCEEDED
    if ratio >= WARNING_RATIO:
        return UsageStatus.WARNING
    return UsageStatus.NORMAL
