"""Structured logging for the service (structlog over stdlib logging).

Production renders one JSON object per line; every other environment gets the
colored console renderer. Records from third-party libraries (uvicorn,
imapclient, playwright) go through the same processor chain.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


APP_LOG_NAME = "email-automation"

# Event keys whose values never reach the log output
SECRET_KEYS = frozenset({"password", "api_key", "token", "authorization", "x-api-key"})
REDACTED = "***"

QUIET_LOGGERS = ("httpx", "httpcore", "imapclient", "asyncio")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = APP_LOG_NAME
    return event_dict


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask mailbox passwords and provider keys passed as log fields."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def build_processors(production: bool) -> list[Processor]:
    """Processors shared by structlog loggers and foreign stdlib records."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        redact_secrets,
    ]
    if production:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        log_level: Level name; unknown names fall back to INFO
        environment: "production" selects JSON output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    production = environment.lower() == "production"
    processors = build_processors(production)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor
    if production:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=environment,
        renderer="json" if production else "console",
    )
