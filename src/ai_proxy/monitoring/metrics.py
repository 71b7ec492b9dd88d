"""Custom Prometheus metrics for the AI request proxy.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- provider_requests_total{outcome="rate_limited"} (free-tier quota pressure)
- fallbacks_total (preferred provider unhealthy)
- all_providers_failed_total (no backend could answer)
"""

from prometheus_client import Counter, Histogram

# === Provider call metrics ===

provider_requests_total = Counter(
    "provider_requests_total",
    "Total outbound provider calls by provider and outcome",
    ["provider", "outcome"],
)
"""
Outbound call counter.

Labels:
- provider: gemini, groq, cerebras
- outcome: success, rate_limited, rejected, local_failure
"""

provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Latency of successful provider calls in seconds",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Latency of successful calls only (same value reported as latency_ms).

Alert thresholds:
- WARN: p95 > 10s
"""

provider_tokens_total = Counter(
    "provider_tokens_total",
    "Total tokens consumed by provider and type",
    ["provider", "token_type"],
)
"""
Token consumption counter.

Labels:
- provider: Provider identity
- token_type: input, output

Estimated counts (chars/4) are included; used for quota tracking.
"""

# === Retry / fallback metrics ===

retries_total = Counter(
    "retries_total",
    "Backoff retries scheduled after rate-limit errors",
    ["provider"],
)

fallbacks_total = Counter(
    "fallbacks_total",
    "Calls answered by a provider other than the first choice",
    ["from_provider", "to_provider"],
)

all_providers_failed_total = Counter(
    "all_providers_failed_total",
    "Smart calls where every candidate provider failed",
)

# === API metrics ===

proxy_requests_total = Counter(
    "proxy_requests_total",
    "Total proxy API requests by endpoint and status",
    ["endpoint", "status"],
)
"""
Labels:
- endpoint: validate, generate
- status: success, error
"""
