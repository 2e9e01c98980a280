"""Scoped, nestable tracing context propagation.

::

    from scoped_tracing import ScopedTracingContext, set_global_tracer

    set_global_tracer(my_tracer)
    with ScopedTracingContext("handle-request"):
        with ScopedTracingContext("load-user"):  # child of handle-request
            ...
"""

from scoped_tracing.core.errors import (
    ConfigError,
    NoTracerConfigured,
    ScopeViolation,
    TracingError,
)
from scoped_tracing.telemetry import (
    ScopedTracingContext,
    ScopeFrame,
    ScopeStack,
    current_span,
    current_tracer,
    get_global_tracer,
    reset_global_tracer,
    set_global_tracer,
    traced,
)

__all__ = [
    "ConfigError",
    "NoTracerConfigured",
    "ScopeFrame",
    "ScopeStack",
    "ScopeViolation",
    "ScopedTracingContext",
    "TracingError",
    "current_span",
    "current_tracer",
    "get_global_tracer",
    "reset_global_tracer",
    "set_global_tracer",
    "traced",
]
