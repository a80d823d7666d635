"""
PURPOSE: structlog setup for HyperLens and the logger factory used by every module.

Logs are one JSON object per line with the event name, level, ISO timestamp,
the module that emitted them and any key/value context. Tracebacks passed
with exc_info=True are rendered into an "exception" field.
"""

import logging
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """
    PURPOSE: Configure structlog once at application startup.

    CALLED BY: main.on_startup

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        json_output: Render JSON lines; False renders for a terminal.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(module_name: str, **context: Any) -> structlog.BoundLogger:
    """
    PURPOSE: Logger bound to the emitting module plus optional fixed context.

    Args:
        module_name: Dotted name of the caller, e.g. "search.resolver".
        **context: Extra key/values attached to every event of this logger.

    Returns:
        structlog.BoundLogger: Bound logger.
    """
    return structlog.get_logger().bind(module=module_name, **context)
