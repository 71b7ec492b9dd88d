"""
Configuration settings for the AI request proxy.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "AI Request Proxy"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Provider endpoints ===
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    CEREBRAS_BASE_URL: str = "https://api.cerebras.ai/v1"
    REQUEST_TIMEOUT: int = 60  # seconds

    # === Provider credentials (read by SettingsCredentialStore only) ===
    GEMINI_API_KEY: Optional[str] = None
    GROQ_API_KEY: Optional[str] = None
    CEREBRAS_API_KEY: Optional[str] = None

    # === Generation Parameters ===
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2048

    # === Retry & Fallback ===
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_MS: int = 1000
    RETRY_MAX_JITTER_MS: int = 1000  # Additive uniform jitter upper bound
    FALLBACK_ORDER: list[str] = ["gemini", "groq", "cerebras"]

    # === Single-call surface ===
    PING_PROMPT: str = "Hello"  # Used when /validate is called without a prompt

    # === Redis (usage + QA logs) ===
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: float = 5.0
    LOG_TTL_SECONDS: int = 30 * 86400  # 30 days
    QA_LOG_MAX_ENTRIES: int = 10000

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
