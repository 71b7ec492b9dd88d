"""
FastAPI API routes and endpoints.

- routes_proxy.py: POST /validate, POST /generate, GET /providers, GET /health
- routes_usage.py: GET /usage/today, GET /usage/records, GET /logs
- dependencies.py: Dependency injection for dispatcher, orchestrator, repository
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
"""

from ai_proxy.api import dependencies, error_handlers, models
from ai_proxy.api.routes_proxy import router as proxy_router
from ai_proxy.api.routes_usage import router as usage_router

__all__ = [
    "proxy_router",
    "usage_router",
    "dependencies",
    "error_handlers",
    "models",
]
