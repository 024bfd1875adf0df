#!/usr/bin/env python3
"""
Structured Logging Setup
Configures stdlib logging and structlog for the recipe manager.
"""

import sys
import logging
from typing import Optional

import structlog
from structlog.stdlib import LoggerFactory

from recipro.config import config

_configured = False


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None, force: bool = False):
    """
    Configure structured logging with Structlog.

    Args:
        level: Log level name, defaults to LOG_LEVEL
        fmt: Renderer, 'json' or 'text', defaults to LOG_FORMAT
        force: Reconfigure even if logging was already set up
    """
    global _configured
    if _configured and not force:
        return

    level = (level or config.LOG_LEVEL).upper()
    fmt = (fmt or config.LOG_FORMAT).lower()

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        force=force,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True
