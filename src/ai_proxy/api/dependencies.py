"""
FastAPI dependency injection for the AI request proxy.

Provides singleton instances of expensive resources (adapters with their
connection pools, the orchestrator) and factory functions for per-request
components.
"""

from functools import lru_cache

from fastapi import Depends

from ai_proxy.config import Settings, settings
from ai_proxy.llm.credentials import CredentialStore, SettingsCredentialStore
from ai_proxy.llm.dispatcher import ProviderDispatcher, build_default_adapters
from ai_proxy.persistence.redis_client import RedisClient
from ai_proxy.persistence.repository import AsyncUsageRepository
from ai_proxy.retry.orchestrator import FallbackOrchestrator
from ai_proxy.retry.policy import RetryPolicy


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_credential_store() -> CredentialStore:
    """Server-side credentials, read from settings."""
    return SettingsCredentialStore(get_settings())


@lru_cache()
def get_dispatcher() -> ProviderDispatcher:
    """
    Get singleton dispatcher.

    The adapter registry is built once; each adapter keeps its own pooled
    httpx client for the lifetime of the process.

    Returns:
        ProviderDispatcher instance
    """
    return ProviderDispatcher(
        build_default_adapters(get_settings()),
        get_credential_store(),
    )


@lru_cache()
def get_orchestrator() -> FallbackOrchestrator:
    """
    Get singleton fallback orchestrator.

    Returns:
        FallbackOrchestrator configured with FALLBACK_ORDER and the retry settings
    """
    app_settings = get_settings()
    return FallbackOrchestrator(
        get_dispatcher(),
        app_settings.FALLBACK_ORDER,
        retry_policy=RetryPolicy.from_settings(app_settings),
    )


def get_async_repository(
    settings: Settings = Depends(get_settings),
) -> AsyncUsageRepository:
    """
    Create async usage repository.

    Not cached: the repository is a thin wrapper; the Redis pool is shared.

    Args:
        settings: Application settings (injected)

    Returns:
        AsyncUsageRepository instance
    """
    redis_client = RedisClient.get_async_client(settings)
    return AsyncUsageRepository(redis_client, settings)
