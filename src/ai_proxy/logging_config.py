"""Structured logging for the AI request proxy (structlog).

Production renders one JSON object per line; development renders a colored
console view. Standard library loggers (uvicorn, redis, error handlers) are
routed through the same processor chain, so both end up in one format.

Provider credentials never reach the output: credential-named fields are
masked and `key=` query parameters are scrubbed from any string value.
"""

import logging
import re
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "ai-request-proxy"

CREDENTIAL_FIELDS = frozenset({"credential", "api_key", "key", "authorization"})

# Gemini authenticates with ?key=... so URLs in log lines carry the secret
QUERY_KEY_PATTERN = re.compile(r"([?&]key=)[^&\s\"']+")

# Loggers that echo request URLs or are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def mask_credential(value: str) -> str:
    """Keep the last four characters of long secrets, hide short ones entirely."""
    return f"***{value[-4:]}" if len(value) > 8 else "***"


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def redact_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential fields and scrub key query parameters from string values."""
    for name, value in event_dict.items():
        if not isinstance(value, str) or not value:
            continue
        if name in CREDENTIAL_FIELDS:
            event_dict[name] = mask_credential(value)
        elif "key=" in value:
            event_dict[name] = QUERY_KEY_PATTERN.sub(r"\1***", value)
    return event_dict


def build_processors(is_production: bool) -> list[Processor]:
    """Processor chain shared by structlog and foreign (stdlib) log records."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        redact_credentials,
    ]
    # ConsoleRenderer formats exc_info itself; JSON needs it flattened to a string
    if is_production:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names fall back to INFO)
        environment: "production" selects JSON output, anything else the console renderer
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"
    processors = build_processors(is_production)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if is_production
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
