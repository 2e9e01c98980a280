"""Scoped tracing context propagation.

Public API
----------
::

    from scoped_tracing.telemetry import (
        ScopedTracingContext,
        ScopeStack,
        ScopeFrame,
        traced,
        set_global_tracer,
        MemoryTracer,
        OpenTracingTracer,
    )
"""

from __future__ import annotations

from scoped_tracing.telemetry.context import (
    ScopedTracingContext,
    current_span,
    current_tracer,
)
from scoped_tracing.telemetry.decorators import traced
from scoped_tracing.telemetry.global_tracer import (
    get_global_tracer,
    reset_global_tracer,
    set_global_tracer,
)
from scoped_tracing.telemetry.memory import (
    MemorySpan,
    MemorySpanBuilder,
    MemoryTracer,
)
from scoped_tracing.telemetry.opentracing_adapter import (
    OpenTracingSpan,
    OpenTracingSpanBuilder,
    OpenTracingTracer,
)
from scoped_tracing.telemetry.spans import ScopeFrame, ScopeStack, default_stack

__all__ = [
    # Core
    "ScopedTracingContext",
    "ScopeStack",
    "ScopeFrame",
    "default_stack",
    "current_span",
    "current_tracer",
    "traced",
    # Global tracer
    "get_global_tracer",
    "reset_global_tracer",
    "set_global_tracer",
    # Backends
    "MemorySpan",
    "MemorySpanBuilder",
    "MemoryTracer",
    "OpenTracingSpan",
    "OpenTracingSpanBuilder",
    "OpenTracingTracer",
]
