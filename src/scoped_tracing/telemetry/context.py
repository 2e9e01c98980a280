"""ScopedTracingContext: make a tracer and/or span current for one scope.

Typical use::

    with ScopedTracingContext("load-orders"):
        ...  # spans opened here become children of "load-orders"

Construction resolves the tracer (explicit, or inherited from the stack
and finally the global tracer), resolves the span (adopted, started from
a builder, or started for an operation name as a child of the currently
effective span) and pushes exactly one frame.  Closing validates that this
frame is still on top, finishes the span and pops the frame.
"""

from __future__ import annotations

import logging
from types import TracebackType

from scoped_tracing.core.errors import NoTracerConfigured, ScopeViolation
from scoped_tracing.core.interfaces import ISpan, ISpanBuilder, ITracer
from scoped_tracing.telemetry.spans import ScopeFrame, ScopeStack, default_stack

logger = logging.getLogger(__name__)


class ScopedTracingContext:
    """Scoped binding of a tracer and/or span on a :class:`ScopeStack`.

    Parameters
    ----------
    operation_name:
        Start a new span for this operation, parented to the currently
        effective span if there is one.
    tracer:
        Bind this tracer for the scope.  Given alone, only the tracer is
        bound and no span is started.
    span:
        Adopt an already-started span as-is (never re-parented).
    builder:
        Start the span from this builder, parented to the currently
        effective span if there is one.
    stack:
        Stack to bind on.  Defaults to the package-wide stack.

    At most one of *operation_name*, *span* and *builder* may be given;
    if none is, *tracer* is required.

    Raises:
        NoTracerConfigured: No tracer was passed and none is in effect.
    """

    def __init__(
        self,
        operation_name: str | None = None,
        *,
        tracer: ITracer | None = None,
        span: ISpan | None = None,
        builder: ISpanBuilder | None = None,
        stack: ScopeStack | None = None,
    ) -> None:
        given = [v for v in (operation_name, span, builder) if v is not None]
        if len(given) > 1:
            raise ValueError(
                "Pass at most one of operation_name, span or builder."
            )
        if not given and tracer is None:
            raise TypeError(
                "ScopedTracingContext needs an operation name, span, "
                "builder or tracer."
            )

        self._stack = stack if stack is not None else default_stack
        self._closed = False

        resolved = tracer if tracer is not None else self._stack.effective_tracer()
        if resolved is None:
            raise NoTracerConfigured()

        if operation_name is not None:
            builder = resolved.build_span(operation_name)
        if builder is not None:
            parent = self._stack.effective_span()
            if parent is not None:
                builder = builder.as_child_of(parent)
            span = builder.start()

        self._tracer = tracer
        self._span = span
        self._frame = ScopeFrame(tracer_override=tracer, span_override=span)
        self._stack.push(self._frame)

    # -- named constructors ---------------------------------------------------

    @classmethod
    def for_operation(
        cls,
        operation_name: str,
        *,
        tracer: ITracer | None = None,
        stack: ScopeStack | None = None,
    ) -> ScopedTracingContext:
        """Start a span for *operation_name* as a child of the current span."""
        return cls(operation_name, tracer=tracer, stack=stack)

    @classmethod
    def for_span(
        cls,
        span: ISpan,
        *,
        tracer: ITracer | None = None,
        stack: ScopeStack | None = None,
    ) -> ScopedTracingContext:
        """Make an existing *span* current without re-parenting it."""
        return cls(tracer=tracer, span=span, stack=stack)

    @classmethod
    def for_builder(
        cls,
        builder: ISpanBuilder,
        *,
        tracer: ITracer | None = None,
        stack: ScopeStack | None = None,
    ) -> ScopedTracingContext:
        """Start *builder* as a child of the current span and make it current."""
        return cls(tracer=tracer, builder=builder, stack=stack)

    @classmethod
    def for_tracer(
        cls, tracer: ITracer, *, stack: ScopeStack | None = None,
    ) -> ScopedTracingContext:
        """Bind *tracer* for the scope without starting a span."""
        return cls(tracer=tracer, stack=stack)

    # -- accessors ------------------------------------------------------------

    @property
    def tracer(self) -> ITracer | None:
        """Tracer this scope bound, or ``None`` if it inherited one."""
        return self._tracer

    @property
    def span(self) -> ISpan | None:
        """Span this scope made current, or ``None`` for tracer-only scopes."""
        return self._span

    @property
    def closed(self) -> bool:
        return self._closed

    # -- release --------------------------------------------------------------

    def close(self) -> None:
        """Finish the span (if any) and pop this scope's frame.

        Validation happens before anything is mutated: on failure the span
        is left running and the stack is left as it was.

        Raises:
            ScopeViolation: The scope was already closed, or a different
                scope is on top of the stack.
        """
        if self._closed:
            raise _violation("Scope already closed.")
        if self._tracer is not None and self._stack.effective_tracer() is not self._tracer:
            raise _violation("Unexpected Tracer set.")
        if self._span is not None and self._stack.effective_span() is not self._span:
            raise _violation("Unexpected Span found.")
        frames = self._stack.frames
        if not frames or frames[-1] is not self._frame:
            raise _violation("Scope closed out of order.")

        try:
            if self._span is not None:
                self._span.finish()
        finally:
            self._stack.pop_checked(self._tracer, self._span, frame=self._frame)
            self._closed = True

    def __enter__(self) -> ScopedTracingContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(tracer={self._tracer!r}, "
            f"span={self._span!r}, closed={self._closed})"
        )


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def current_tracer(stack: ScopeStack | None = None) -> ITracer | None:
    """Tracer in effect for the current execution context."""
    return (stack if stack is not None else default_stack).effective_tracer()


def current_span(stack: ScopeStack | None = None) -> ISpan | None:
    """Span in effect for the current execution context, if any."""
    return (stack if stack is not None else default_stack).effective_span()


def _violation(reason: str) -> ScopeViolation:
    logger.warning("Scope violation on close: %s", reason)
    return ScopeViolation(reason)
