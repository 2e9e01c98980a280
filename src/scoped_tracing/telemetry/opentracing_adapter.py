"""Adapter exposing an ``opentracing.Tracer`` through :class:`ITracer`.

Spans are started with ``ignore_active_span=True``: parentage comes from
the scope stack only, never from the opentracing scope manager.  A
parent from another backend cannot be linked; the child starts as a root
span of its own trace instead.
"""

from __future__ import annotations

import logging
from typing import Any

import opentracing

from scoped_tracing.core.interfaces import ISpan

logger = logging.getLogger(__name__)


class OpenTracingSpan:
    """Wraps an ``opentracing.Span``; the original is kept on :attr:`span`."""

    def __init__(self, span: opentracing.Span) -> None:
        self.span = span

    @property
    def context(self) -> opentracing.SpanContext:
        return self.span.context

    def set_tag(self, key: str, value: Any) -> OpenTracingSpan:
        self.span.set_tag(key, value)
        return self

    def finish(self) -> None:
        self.span.finish()

    def __repr__(self) -> str:
        return f"OpenTracingSpan({self.span!r})"


class OpenTracingSpanBuilder:
    def __init__(self, tracer: opentracing.Tracer, operation_name: str) -> None:
        self._tracer = tracer
        self._operation_name = operation_name
        self._child_of: opentracing.SpanContext | None = None
        self._tags: dict[str, Any] = {}

    def as_child_of(self, parent: ISpan) -> OpenTracingSpanBuilder:
        if isinstance(parent, (OpenTracingSpan, opentracing.Span)):
            self._child_of = parent.context
        else:
            # Contexts from other backends mean nothing to opentracing
            logger.warning(
                "Parent %s is not an opentracing span; starting %r as a root span",
                type(parent).__name__,
                self._operation_name,
            )
            self._child_of = None
        return self

    def with_tag(self, key: str, value: Any) -> OpenTracingSpanBuilder:
        self._tags[key] = value
        return self

    def start(self) -> OpenTracingSpan:
        span = self._tracer.start_span(
            operation_name=self._operation_name,
            child_of=self._child_of,
            tags=self._tags or None,
            ignore_active_span=True,
        )
        return OpenTracingSpan(span)


class OpenTracingTracer:
    """:class:`ITracer` over any ``opentracing.Tracer`` implementation.

    Parameters
    ----------
    tracer:
        Backend tracer.  Defaults to ``opentracing.global_tracer()``.
    """

    def __init__(self, tracer: opentracing.Tracer | None = None) -> None:
        self.tracer = tracer if tracer is not None else opentracing.global_tracer()

    def build_span(self, operation_name: str) -> OpenTracingSpanBuilder:
        return OpenTracingSpanBuilder(self.tracer, operation_name)

    def __repr__(self) -> str:
        return f"OpenTracingTracer({self.tracer!r})"
