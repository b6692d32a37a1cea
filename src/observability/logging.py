"""
Structured logging for calendar-extract.

structlog renders records as JSON in production and as a coloured console
stream otherwise. Everything is written to stderr: stdout carries the
extracted JSON and must stay parseable.

Library modules log through ``logging.getLogger(__name__)``; commands may
use ``get_logger`` and ``bind_context`` to tag messages with the input
being processed (file name, row number).
"""

import logging
import sys

import structlog
from structlog.types import Processor

from src.config.settings import get_settings

# SDK loggers that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "openpyxl")


def _processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level override (e.g. "DEBUG" from ``--debug``). Defaults
            to DEBUG when ``settings.debug`` is set, otherwise
            ``settings.log_level``.

    Usage:
        setup_logging()
        logger = get_logger(__name__)
        logger.info("Extracted record", source="email.txt", enriched=False)
    """
    settings = get_settings()
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level

    structlog.configure(
        processors=_processors(json_output=settings.is_production),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(getattr(logging, level.upper()))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Attach key-value pairs to every subsequent structlog message."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context variables."""
    structlog.contextvars.clear_contextvars()
