"""Structured logging for PriceLens.

Every event is a structlog event dict tagged with the service name. Debug
mode renders for the console; otherwise one JSON object is written per line.
"""

import logging
import sys

import structlog
from structlog.types import EventDict

from pricelens.config.settings import get_settings

SERVICE_NAME = "pricelens"

# Per-request loggers of the HTTP stack
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "uvicorn.access")


def _add_service(_logger: object, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog and route stdlib logging to stdout.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL``.
        json_output: Render JSON lines; defaults to ``not DEBUG``.
    """
    settings = get_settings()
    log_level = getattr(logging, level or settings.log_level)
    if json_output is None:
        json_output = not settings.debug

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
