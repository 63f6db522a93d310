"""Structured logging setup."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level: str | None) -> int:
    """Convert string log level to logging constant."""

    return _LEVELS.get(str(level or "").strip().upper(), logging.INFO)


def get_processors(fmt: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if str(fmt or "").strip().lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure stdlib logging and structlog; call once at startup."""

    # Logs go to stderr so CLI JSON output on stdout stays parseable.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=get_log_level(level),
    )
    structlog.configure(
        processors=get_processors(fmt),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
