"""Monitoring and metrics instrumentation for the AI request proxy.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from ai_proxy.monitoring.metrics import (
    all_providers_failed_total,
    fallbacks_total,
    provider_latency_seconds,
    provider_requests_total,
    provider_tokens_total,
    proxy_requests_total,
    retries_total,
)

__all__ = [
    "provider_requests_total",
    "provider_latency_seconds",
    "provider_tokens_total",
    "retries_total",
    "fallbacks_total",
    "all_providers_failed_total",
    "proxy_requests_total",
]
