"""
Multi-provider AI request proxy.

Dispatches text-generation requests to interchangeable free-tier backends and
normalizes their responses into a single result type:
- Provider adapters (Gemini "candidates" family, Groq/Cerebras "choices" family)
- Rate-limit aware retry with exponential backoff and jitter
- Fallback across providers in a fixed priority order
- Usage and QA log recording with sensitive-data flagging

Architecture: FastAPI surface + httpx adapters + in-process fallback orchestrator
"""

__version__ = "0.1.0"
