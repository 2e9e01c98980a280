"""Process-wide default tracer.

Read by the scope stack only when no frame on the current execution
context overrides the tracer.  Replacing it is a single reference swap.
"""

from __future__ import annotations

import logging
import threading

from scoped_tracing.core.interfaces import ITracer

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_global_tracer: ITracer | None = None


def set_global_tracer(tracer: ITracer) -> None:
    """Install *tracer* as the process-wide default."""
    global _global_tracer
    with _lock:
        previous, _global_tracer = _global_tracer, tracer
    logger.info(
        "Global tracer set to %s (was %s)",
        type(tracer).__name__,
        type(previous).__name__ if previous is not None else None,
    )


def get_global_tracer() -> ITracer | None:
    """Return the process-wide default tracer, or ``None`` if unset."""
    return _global_tracer


def reset_global_tracer() -> None:
    """Clear the process-wide default.  Intended for test isolation."""
    global _global_tracer
    with _lock:
        _global_tracer = None
