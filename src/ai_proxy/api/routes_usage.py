"""
Usage and QA log routes (read-only views over the Redis store).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ai_proxy.api.dependencies import get_async_repository
from ai_proxy.api.models import (
    QALogEntry,
    QALogsResponse,
    UsageRecordEntry,
    UsageResponse,
    UsageSummaryEntry,
    camel_view,
)
from ai_proxy.llm.dispatcher import resolve_provider
from ai_proxy.models.usage_models import utc_today
from ai_proxy.persistence.repository import AsyncUsageRepository

router = APIRouter()


@router.get("/usage/today", response_model=UsageResponse, summary="Today's usage per provider")
async def get_today_usage(
    repository: AsyncUsageRepository = Depends(get_async_repository),
) -> UsageResponse:
    """Requests and tokens used today, with quota status (normal/warning/exceeded)."""
    summaries = await repository.get_usage_summaries()
    return UsageResponse(
        date=utc_today(),
        providers=[camel_view(UsageSummaryEntry, summary) for summary in summaries],
    )


@router.get("/usage/records", response_model=list[UsageRecordEntry], summary="Usage records of one day")
async def get_usage_records(
    date: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    repository: AsyncUsageRepository = Depends(get_async_repository),
) -> list[UsageRecordEntry]:
    records = await repository.get_usage_records(date)
    return [camel_view(UsageRecordEntry, record) for record in records]


@router.get("/logs", response_model=QALogsResponse, summary="QA logs, newest first")
async def list_qa_logs(
    provider: Optional[str] = None,
    project_id: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    repository: AsyncUsageRepository = Depends(get_async_repository),
) -> QALogsResponse:
    """
    List stored QA logs.

    Args:
        provider: Only logs answered by this provider
        project_id: Only logs of this project
        limit: Maximum number of logs
    """
    logs = await repository.list_qa_logs(
        provider=resolve_provider(provider) if provider else None,
        project_id=project_id,
        limit=limit,
    )
    return QALogsResponse(count=len(logs), logs=[camel_view(QALogEntry, log) for log in logs])
