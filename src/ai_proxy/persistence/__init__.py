"""
Redis persistence layer.

- redis_client.py: Async Redis connection pooling
- repository.py: Repository for QA logs and daily usage counters

Storage Strategy:
- QA logs stored as JSON in a Redis List (newest first, capped)
- Daily per-provider counters in a Redis Hash keyed by UTC date
- Every key expires after LOG_TTL_SECONDS
"""

from ai_proxy.persistence.redis_client import (
    RedisClient,
    get_async_redis_client,
)
from ai_proxy.persistence.repository import AsyncUsageRepository

__all__ = [
    "RedisClient",
    "get_async_redis_client",
    "AsyncUsageRepository",
]
