"""
FastAPI application entry point for the AI request proxy.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from ai_proxy import __version__
from ai_proxy.api.dependencies import get_dispatcher
from ai_proxy.api.error_handlers import EXCEPTION_HANDLERS
from ai_proxy.api.middleware import RequestTracingMiddleware
from ai_proxy.api.routes_proxy import router as proxy_router
from ai_proxy.api.routes_usage import router as usage_router
from ai_proxy.config import settings
from ai_proxy.logging_config import configure_logging
from ai_proxy.models.enums import ProviderIdentity
from ai_proxy.persistence.redis_client import RedisClient

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Single entry point for free-tier LLM providers with retry and fallback",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(proxy_router, tags=["proxy"])
app.include_router(usage_router, tags=["usage"])


@app.on_event("startup")
async def startup():
    """Log configuration; credentials are reported as present/missing only."""
    logger.info(
        "Application startup",
        version=__version__,
        environment=settings.ENVIRONMENT,
        fallback_order=settings.FALLBACK_ORDER,
        max_retries=settings.MAX_RETRIES,
        credentials={
            provider.value: bool(getattr(settings, f"{provider.name}_API_KEY"))
            for provider in ProviderIdentity
        },
    )


@app.on_event("shutdown")
async def shutdown():
    """Close provider connection pools and the Redis pool."""
    logger.info("Application shutdown")
    await get_dispatcher().close()
    await RedisClient.close_async_pool()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "providers": "/providers",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ai_proxy.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
