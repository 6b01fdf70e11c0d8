"""structlog configuration.

Components call ``get_logger("pivots.daily")`` at import time; the returned
logger is lazy, so ``setup_logging`` may run before or after that. Importing
this module installs a WARNING-level stderr setup unless structlog was
already configured by the host application.
"""

from __future__ import annotations

import logging
import sys

import structlog

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog for console (default) or JSON output."""

    log_level = _LEVELS.get(str(level).upper(), logging.INFO)

    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger bound to a component name."""
    return structlog.get_logger(name, component=name)


def configure_default_logging() -> None:
    """Quiet stderr defaults for library use; keeps any existing configuration."""
    if not structlog.is_configured():
        setup_logging("WARNING")


configure_default_logging()
