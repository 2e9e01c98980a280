"""Logging setup for applications using scoped tracing."""

from scoped_tracing.observability.logger import (
    add_scope_context,
    get_logger,
    reset_logging,
    setup_logging,
)

__all__ = ["add_scope_context", "get_logger", "reset_logging", "setup_logging"]
