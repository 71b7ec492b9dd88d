"""
Repository pattern for Redis-based usage and QA log persistence.

Storage Strategy:
- QA logs: List "proxy:qa_logs" with JSON entries (LPUSH, newest first),
  capped at QA_LOG_MAX_ENTRIES
- Daily usage: Hash "proxy:usage:{YYYY-MM-DD}" with fields
  "{provider}:requests" / "{provider}:tokens" (HINCRBY)
- Usage records: List "proxy:usage_records:{YYYY-MM-DD}" with JSON entries
- TTL: LOG_TTL_SECONDS on every key

Writes never raise: a failed usage write must not turn a successful
generation into an error, so failures are logged and reported as False.
"""

import uuid
from typing import Optional

import structlog
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from ai_proxy.config import Settings
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.models.generation_models import GenerationResult
from ai_proxy.models.catalog import get_provider_info
from ai_proxy.models.usage_models import (
    ProviderUsage,
    QALog,
    UsageRecord,
    UsageSummary,
    compute_usage_status,
    utc_today,
)
from ai_proxy.pii.detector import contains_sensitive_data

logger = structlog.get_logger(__name__)


class AsyncUsageRepository:
    """
    Async repository for QA logs and usage counters.
    """

    QA_LOGS_KEY = "proxy:qa_logs"
    USAGE_PREFIX = "proxy:usage:"
    USAGE_RECORDS_PREFIX = "proxy:usage_records:"

    def __init__(self, redis_client: AsyncRedis, settings: Settings):
        """
        Initialize repository.

        Args:
            redis_client: Async Redis client instance
            settings: Application settings
        """
        self.redis = redis_client
        self.settings = settings
        self.ttl = settings.LOG_TTL_SECONDS
        self.max_qa_logs = settings.QA_LOG_MAX_ENTRIES

    async def append_qa_log(self, log: QALog) -> Optional[str]:
        """
        Append a QA log.

        Args:
            log: QALog to store (id is assigned if missing)

        Returns:
            Stored log id, or None if the write failed
        """
        log_id = log.id or uuid.uuid4().hex
        stored = log.model_copy(update={"id": log_id})
        try:
            await self.redis.lpush(self.QA_LOGS_KEY, stored.model_dump_json())
            await self.redis.ltrim(self.QA_LOGS_KEY, 0, self.max_qa_logs - 1)
            await self.redis.expire(self.QA_LOGS_KEY, self.ttl)
        except RedisError as e:
            logger.error("Failed to save QA log", log_id=log_id, error=str(e), exc_info=True)
            return None

        logger.info(
            "Saved QA log",
            log_id=log_id,
            provider=stored.provider.value,
            project_id=stored.project_id,
        )
        return log_id

    async def append_usage_record(self, record: UsageRecord) -> bool:
        """
        Add a usage increment to the daily counters.

        Args:
            record: UsageRecord to apply

        Returns:
            True if saved successfully
        """
        record = record.model_copy(update={"id": record.id or uuid.uuid4().hex})
        usage_key = f"{self.USAGE_PREFIX}{record.date}"
        records_key = f"{self.USAGE_RECORDS_PREFIX}{record.date}"
        provider = record.provider.value
        try:
            await self.redis.hincrby(usage_key, f"{provider}:requests", record.request_count)
            await self.redis.hincrby(usage_key, f"{provider}:tokens", record.token_count)
            await self.redis.expire(usage_key, self.ttl)
            await self.redis.lpush(records_key, record.model_dump_json())
            await self.redis.expire(records_key, self.ttl)
        except RedisError as e:
            logger.error("Failed to save usage record", provider=provider, error=str(e), exc_info=True)
            return False

        logger.debug(
            "Saved usage record",
            provider=provider,
            date=record.date,
            token_count=record.token_count,
        )
        return True

    async def record_generation(
        self,
        prompt: str,
        result: GenerationResult,
        project_id: Optional[str] = None,
    ) -> Optional[str]:
        """
        Store the QA log and usage increment for a successful generation.

        Usage is attributed to the provider that actually answered.

        Returns:
            QA log id, or None if the QA log write failed
        """
        log = QALog(
            project_id=project_id or "unassigned",
            provider=result.provider,
            model=result.model,
            prompt=prompt,
            response=result.text,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            total_tokens=result.total_tokens,
            latency_ms=result.latency_ms,
            has_sensitive_data=contains_sensitive_data(prompt) or contains_sensitive_data(result.text),
            fallback_used=result.fallback_used,
            fallback_from=result.fallback_from,
        )
        log_id = await self.append_qa_log(log)
        await self.append_usage_record(
            UsageRecord(
                provider=result.provider,
                request_count=1,
                token_count=result.total_tokens,
                project_id=project_id,
            )
        )
        return log_id

    async def list_qa_logs(
        self,
        provider: Optional[ProviderIdentity] = None,
        project_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[QALog]:
        """
        List QA logs, newest first.

        Args:
            provider: Only logs answered by this provider
            project_id: Only logs of this project
            limit: Maximum number of logs

        Returns:
            Matching QALogs (empty on storage failure)
        """
        try:
            entries = await self.redis.lrange(self.QA_LOGS_KEY, 0, -1)
        except RedisError as e:
            logger.error("Failed to retrieve QA logs", error=str(e), exc_info=True)
            return []

        logs: list[QALog] = []
        for entry in entries:
            log = QALog.model_validate_json(entry)
            if provider is not None and log.provider != provider:
                continue
            if project_id is not None and log.project_id != project_id:
                continue
            logs.append(log)
            if limit is not None and len(logs) >= limit:
                break
        return logs

    async def get_qa_log(self, log_id: str) -> Optional[QALog]:
        for log in await self.list_qa_logs():
            if log.id == log_id:
                return log
        return None

    async def get_usage_records(self, date: Optional[str] = None) -> list[UsageRecord]:
        """Usage records of one day (today by default), newest first."""
        key = f"{self.USAGE_RECORDS_PREFIX}{date or utc_today()}"
        try:
            entries = await self.redis.lrange(key, 0, -1)
        except RedisError as e:
            logger.error("Failed to retrieve usage records", error=str(e), exc_info=True)
            return []
        return [UsageRecord.model_validate_json(entry) for entry in entries]

    async def get_today_usage(self) -> dict[ProviderIdentity, ProviderUsage]:
        """
        Today's request and token totals for every provider.

        Providers without usage today are present with zero counts.
        """
        usage = {provider: ProviderUsage() for provider in ProviderIdentity}
        try:
            counters = await self.redis.hgetall(f"{self.USAGE_PREFIX}{utc_today()}")
        except RedisError as e:
            logger.error("Failed to retrieve daily usage", error=str(e), exc_info=True)
            return usage

        for field, value in (counters or {}).items():
            provider_name, _, metric = field.partition(":")
            try:
                provider = ProviderIdentity(provider_name)
            except ValueError:
                continue
            if metric == "requests":
                usage[provider].requests = int(value)
            elif metric == "tokens":
                usage[provider].tokens = int(value)
        return usage

    async def get_usage_summaries(self) -> list[UsageSummary]:
        """Today's usage of every provider classified against its daily quota."""
        usage = await self.get_today_usage()
        summaries = []
        for provider, counts in usage.items():
            limits = get_provider_info(provider).default_limits
            summaries.append(
                UsageSummary(
                    provider=provider,
                    today_requests=counts.requests,
                    today_tokens=counts.tokens,
                    limits=limits,
                    status=compute_usage_status(limits, counts),
                )
            )
        return summaries

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError:
            return False
