"""
Shared Redis connection pool for the usage and QA log store.

One asyncio pool per process; clients handed out by get_async_client() are
cheap views over it. The pool is created lazily on first use and torn down
on application shutdown.
"""

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from ai_proxy.config import Settings

logger = logging.getLogger(__name__)


def safe_redis_url(url: str) -> str:
    """Drop the password from a redis:// URL before it is logged."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = f"{parts.username or ''}:***@{parts.hostname}"
    if parts.port:
        netloc += f":{parts.port}"
    return parts._replace(netloc=netloc).geturl()


def pool_options(settings: Settings) -> dict[str, Any]:
    """Connection pool options; values are decoded to str for JSON payloads."""
    return {
        "max_connections": settings.REDIS_MAX_CONNECTIONS,
        "decode_responses": True,
        "socket_timeout": settings.REDIS_SOCKET_TIMEOUT,
        "socket_connect_timeout": settings.REDIS_SOCKET_TIMEOUT,
        "retry_on_timeout": True,
    }


class RedisClient:
    """Process-wide holder of the async connection pool."""

    _async_pool: Optional[AsyncConnectionPool] = None

    @classmethod
    def get_async_client(cls, settings: Settings) -> AsyncRedis:
        if cls._async_pool is None:
            cls._async_pool = AsyncConnectionPool.from_url(
                settings.REDIS_URL, **pool_options(settings)
            )
            logger.info(
                "Redis pool created",
                extra={
                    "url": safe_redis_url(settings.REDIS_URL),
                    "max_connections": settings.REDIS_MAX_CONNECTIONS,
                },
            )
        return AsyncRedis(connection_pool=cls._async_pool)

    @classmethod
    async def close_async_pool(cls) -> None:
        """Disconnect every pooled connection; safe to call when no pool exists."""
        pool, cls._async_pool = cls._async_pool, None
        if pool is None:
            return
        await pool.disconnect()
        logger.info("Redis pool closed")


async def get_async_redis_client(settings: Settings) -> AsyncRedis:
    """FastAPI-style dependency returning a client over the shared pool."""
    return RedisClient.get_async_client(settings)
