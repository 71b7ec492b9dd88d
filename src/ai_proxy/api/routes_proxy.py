"""
Proxy API routes.

- POST /validate: single call with a caller-supplied key (no retry, no fallback)
- POST /generate: smart call with retry and fallback, server-side credentials
- GET /providers: provider catalog
- GET /health: dependency health
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ai_proxy import __version__
from ai_proxy.api.dependencies import (
    get_async_repository,
    get_credential_store,
    get_dispatcher,
    get_orchestrator,
    get_settings,
)
from ai_proxy.api.error_handlers import error_response
from ai_proxy.api.models import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    LimitsEntry,
    ProviderEntry,
    ProvidersResponse,
    ValidateRequest,
    ValidateResponse,
    camel_view,
)
from ai_proxy.config import Settings
from ai_proxy.llm.credentials import CredentialStore
from ai_proxy.llm.dispatcher import ProviderDispatcher, resolve_provider
from ai_proxy.llm.exceptions import LocalFailure, MissingCredential, ProviderError
from ai_proxy.models.catalog import PROVIDER_CATALOG, estimate_cost, get_default_model
from ai_proxy.models.generation_models import GenerationRequest
from ai_proxy.monitoring.metrics import proxy_requests_total
from ai_proxy.persistence.repository import AsyncUsageRepository
from ai_proxy.retry.orchestrator import FallbackOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/validate",
    response_model=ValidateResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate a provider key with one call",
    description="""
    Dispatch exactly one generation call to the given provider with the given
    key. No retry and no fallback: the result reflects that provider and key
    only. Upstream error statuses are mirrored (a 401 stays a 401).
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed input or unsupported provider"},
        429: {"model": ErrorResponse, "description": "Provider rate limit"},
        500: {"model": ErrorResponse, "description": "Local failure"},
    },
)
async def validate_provider(
    body: ValidateRequest,
    dispatcher: ProviderDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_settings),
):
    """
    Single-call surface.

    Args:
        body: Provider, key, optional model and prompt
        dispatcher: Provider dispatcher (injected)
        settings: Application settings (injected)

    Returns:
        ValidateResponse, or an error body
    """
    provider = resolve_provider(body.provider)
    prompt = body.prompt if body.prompt and body.prompt.strip() else settings.PING_PROMPT

    try:
        result = await dispatcher.dispatch(prompt, provider, body.model, credential=body.key)
    except MissingCredential as exc:
        proxy_requests_total.labels(endpoint="validate", status="error").inc()
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)
    except LocalFailure as exc:
        proxy_requests_total.labels(endpoint="validate", status="error").inc()
        logger.error("Validate call failed locally", provider=provider.value, error=exc.message)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc.details)
    except ProviderError:
        proxy_requests_total.labels(endpoint="validate", status="error").inc()
        raise

    proxy_requests_total.labels(endpoint="validate", status="success").inc()
    logger.info(
        "Provider key validated",
        provider=provider.value,
        model=result.model,
        latency_ms=result.latency_ms,
    )
    return ValidateResponse.from_result(
        result,
        estimate_cost(result.provider, result.input_tokens, result.output_tokens),
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate with retry and fallback",
    description="""
    Try the preferred provider (with backoff on rate limits), then every other
    provider in the configured fallback order. Without a preferred provider
    the fallback order is walked from the start. Successful calls are recorded
    as QA logs and usage records.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed input or unknown provider"},
        503: {"model": ErrorResponse, "description": "All providers failed"},
    },
)
async def generate(
    body: GenerateRequest,
    orchestrator: FallbackOrchestrator = Depends(get_orchestrator),
    repository: AsyncUsageRepository = Depends(get_async_repository),
) -> GenerateResponse:
    """
    Smart-call surface.

    Args:
        body: Prompt, optional preferred provider, model and project
        orchestrator: Fallback orchestrator (injected)
        repository: Usage repository (injected)

    Returns:
        GenerateResponse with the stored QA log id
    """
    request = GenerationRequest(
        prompt=body.prompt,
        provider=resolve_provider(body.provider) if body.provider else None,
        model=body.model,
        project_id=body.project_id,
    )

    try:
        result = await orchestrator.smart_call(request)
    except ProviderError:
        proxy_requests_total.labels(endpoint="generate", status="error").inc()
        raise

    log_id = await repository.record_generation(request.prompt, result, request.project_id)
    proxy_requests_total.labels(endpoint="generate", status="success").inc()

    logger.info(
        "Generation completed",
        provider=result.provider.value,
        model=result.model,
        fallback_used=result.fallback_used,
        total_tokens=result.total_tokens,
        log_id=log_id,
    )
    return GenerateResponse.from_result(
        result,
        estimate_cost(result.provider, result.input_tokens, result.output_tokens),
        log_id=log_id,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="Provider catalog",
)
async def list_providers(
    orchestrator: FallbackOrchestrator = Depends(get_orchestrator),
    credentials: CredentialStore = Depends(get_credential_store),
) -> ProvidersResponse:
    """Models, free-tier limits and pricing of every provider."""
    entries = [
        ProviderEntry(
            provider=provider,
            name=info.name,
            models=list(info.models),
            default_model=get_default_model(provider),
            limits=camel_view(LimitsEntry, info.default_limits),
            cost_per_1m_input=info.cost_per_1m_input,
            cost_per_1m_output=info.cost_per_1m_output,
            configured=credentials.get_credential(provider) is not None,
        )
        for provider, info in PROVIDER_CATALOG.items()
    ]
    return ProvidersResponse(providers=entries, fallback_order=list(orchestrator.fallback_order))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="""
    Check the health of the proxy and its dependencies.

    Returns status of:
    - Redis (usage and QA log store)
    - Each provider's server-side credential
    """,
    responses={
        200: {"description": "Healthy or degraded"},
        503: {"description": "No provider can be called"},
    },
)
async def health_check(
    repository: AsyncUsageRepository = Depends(get_async_repository),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Healthy when Redis answers and at least one provider has a credential.

    Redis being down only degrades the service: generation still works,
    usage recording does not.
    """
    services = {}
    services["redis"] = "ok" if await repository.ping() else "unreachable"

    configured = 0
    for provider in PROVIDER_CATALOG:
        if credentials.get_credential(provider) is not None:
            services[provider.value] = "configured"
            configured += 1
        else:
            services[provider.value] = "missing_credential"

    if configured == 0:
        health_status = "unhealthy"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif services["redis"] != "ok":
        health_status = "degraded"
        status_code = status.HTTP_200_OK
    else:
        health_status = "healthy"
        status_code = status.HTTP_200_OK

    logger.info("Health check", status=health_status, services=services)

    response = HealthResponse(status=health_status, version=__version__, services=services)
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
    )
