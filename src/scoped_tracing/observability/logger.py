"""Structured JSON logging with scope context.

Uses structlog for structured logging with JSON output.  Library modules
log through the standard ``logging`` module; a structlog
``ProcessorFormatter`` on the root handler renders those records through
the same chain as structlog loggers, so every entry carries the depth of
the current scope stack and, when the effective span exposes them, its
span_id and trace_id.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from scoped_tracing.telemetry.spans import default_stack

# Marks the root handler installed by setup_logging
_HANDLER_FLAG = "_scoped_tracing_handler"


def add_scope_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add scope depth and current span ids."""
    event_dict["scope_depth"] = default_stack.depth
    span = default_stack.effective_span()
    if span is not None:
        for attr in ("span_id", "trace_id"):
            value = getattr(span, attr, None)
            if value is not None:
                event_dict.setdefault(attr, value)
    return event_dict


def _shared_processors() -> list[Any]:
    """Processors run for both structlog and stdlib log records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_scope_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    setattr(handler, _HANDLER_FLAG, True)

    _remove_handler()
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(log_level)


def reset_logging() -> None:
    """Undo :func:`setup_logging`: drop its handler and structlog config."""
    _remove_handler()
    structlog.reset_defaults()


def _remove_handler() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)
            handler.close()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
