"""Structured logging configuration using structlog.

Log events go to stderr so that stdout stays free for the splitter's own
output (plain text, JSON or YAML rendered by the command-line layer).
Production runs get one JSON object per line; interactive runs get the
colored console renderer.

Two processors keep model traffic out of the logs: secrets are masked and
long string fields (prompts, response bodies) are cut to a bounded size.
"""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from codesplit.config import Settings


_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "asyncio")

SECRET_FIELDS = frozenset({"api_key", "authorization", "x-api-key"})
MAX_FIELD_LENGTH = 500


def app_context(app_name: str, app_version: str) -> Processor:
    """Build a processor tagging every event with the application name and version."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        return event_dict

    return add_app_context


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask API keys and authorization headers, keeping the last 4 characters."""
    for key in event_dict.keys() & SECRET_FIELDS:
        value = event_dict[key]
        if value:
            event_dict[key] = f"***{str(value)[-4:]}"
    return event_dict


def truncate_long_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Cut string fields longer than MAX_FIELD_LENGTH (the event message excepted)."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
            hidden = len(value) - MAX_FIELD_LENGTH
            event_dict[key] = f"{value[:MAX_FIELD_LENGTH]}...(+{hidden} chars)"
    return event_dict


def _shared_processors(
    is_production: bool, app_name: str = "codesplit", app_version: str = "0.1.0"
) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        app_context(app_name, app_version),
        redact_secrets,
        truncate_long_values,
    ]
    if is_production:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: TextIO | None = None,
    app_name: str = "codesplit",
    app_version: str = "0.1.0",
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: "production" selects JSON lines, anything else the console renderer
        stream: Destination stream (default: sys.stderr)
        app_name: Value of the "app" field on every event
        app_version: Value of the "version" field on every event

    Loggers of httpx, httpcore, anthropic and asyncio are raised to WARNING
    so that per-request chatter does not drown the retry events.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"
    processors = _shared_processors(is_production, app_name, app_version)

    renderer: Processor
    if is_production:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )


def configure_logging_from_settings(settings: "Settings") -> None:
    """Configure logging from LOG_LEVEL, ENVIRONMENT, APP_NAME and APP_VERSION settings."""
    configure_logging(
        log_level=settings.LOG_LEVEL,
        environment=settings.ENVIRONMENT,
        app_name=settings.APP_NAME,
        app_version=settings.APP_VERSION,
    )
