"""Structured logging configuration using structlog.

Production runs emit one JSON object per line on stderr; ``console`` format
renders the same events for humans during local runs.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOG_FORMATS = ("json", "console")


def setup_logging(level: str = "info", fmt: str = "json") -> None:
    """Configure structlog output at *level* in *fmt* (``json`` or ``console``)."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer = structlog.dev.ConsoleRenderer(colors=False) if fmt == "console" else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
