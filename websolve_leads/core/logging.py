# websolve_leads/core/logging.py
from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from websolve_leads.core.config import settings


def configure_structlog(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if (log_format or settings.log_format) == "console"
        else structlog.processors.JSONRenderer()
    )
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_library_default() -> None:
    """
    Route events through stdlib logging when the application configured nothing.

    Without handlers stdlib logging only shows warnings and errors on stderr.
    A later configure_structlog() or structlog.configure() call replaces this.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_structlog_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_library_default()
    return structlog.get_logger(name)


def bind_provider_code(provider_code: Optional[str] = None) -> None:
    """Set provider code in structlog context."""
    if provider_code:
        structlog.contextvars.bind_contextvars(provider_code=provider_code)
    else:
        structlog.contextvars.unbind_contextvars("provider_code")
