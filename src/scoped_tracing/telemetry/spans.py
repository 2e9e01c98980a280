"""Per-execution-context stack of tracer/span overrides.

No backend knowledge -- just an ordered stack of frames, each of which
may rebind the active tracer, the active span, or both.  Push on scope
entry, pop on scope exit.  The effective tracer and span are resolved by
scanning from the top of the stack down.

Storage is a :class:`~contextvars.ContextVar` holding an immutable tuple,
so every thread and every asyncio task sees its own stack.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from dataclasses import dataclass

from scoped_tracing.core.errors import ScopeViolation
from scoped_tracing.core.interfaces import ISpan, ITracer
from scoped_tracing.telemetry.global_tracer import get_global_tracer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScopeFrame:
    """One pushed unit of override state.  Compared by identity."""

    tracer_override: ITracer | None = None
    span_override: ISpan | None = None


class ScopeStack:
    """Stack of :class:`ScopeFrame` scoped to the current execution context.

    Parameters
    ----------
    name:
        Name of the backing context variable (shows up in debuggers).

    Each stack owns a :class:`~contextvars.ContextVar`, and contexts keep
    strong references to every variable set in them.  Create stacks once,
    at module level (as :data:`default_stack` is), not per request or per
    call.
    """

    def __init__(self, name: str = "scope_stack") -> None:
        self._frames: ContextVar[tuple[ScopeFrame, ...]] = ContextVar(
            name, default=(),
        )

    # -- mutators -----------------------------------------------------------

    def push(self, frame: ScopeFrame) -> None:
        """Append *frame* to the top of the stack."""
        frames = self._frames.get() + (frame,)
        self._frames.set(frames)
        logger.debug("Pushed scope frame (depth=%d)", len(frames))

    def pop_checked(
        self,
        expected_tracer: ITracer | None = None,
        expected_span: ISpan | None = None,
        *,
        frame: ScopeFrame | None = None,
    ) -> ScopeFrame:
        """Remove the top frame after checking it is the one expected.

        The top frame's overrides must be the very objects passed in (when
        the frame carries them), and when *frame* is given the top frame
        must be that frame.  On failure nothing is popped.

        Raises:
            ScopeViolation: The stack is empty or the top frame differs.
        """
        frames = self._frames.get()
        if not frames:
            raise _violation("Scope stack is empty.")
        top = frames[-1]
        if frame is not None and top is not frame:
            raise _violation("Scope closed out of order.")
        if top.tracer_override is not None and top.tracer_override is not expected_tracer:
            raise _violation("Unexpected Tracer set.")
        if top.span_override is not None and top.span_override is not expected_span:
            raise _violation("Unexpected Span found.")
        self._frames.set(frames[:-1])
        logger.debug("Popped scope frame (depth=%d)", len(frames) - 1)
        return top

    # -- read-only ----------------------------------------------------------

    def effective_tracer(self) -> ITracer | None:
        """Nearest tracer override, else the global tracer, else ``None``."""
        for frame in reversed(self._frames.get()):
            if frame.tracer_override is not None:
                return frame.tracer_override
        return get_global_tracer()

    def effective_span(self) -> ISpan | None:
        """Nearest span override, or ``None`` when no frame binds a span."""
        for frame in reversed(self._frames.get()):
            if frame.span_override is not None:
                return frame.span_override
        return None

    @property
    def frames(self) -> tuple[ScopeFrame, ...]:
        """Frames from bottom to top."""
        return self._frames.get()

    @property
    def depth(self) -> int:
        """Number of open scopes."""
        return len(self._frames.get())

    def __len__(self) -> int:
        return self.depth


def _violation(reason: str) -> ScopeViolation:
    logger.warning("Scope violation: %s", reason)
    return ScopeViolation(reason)


# Stack used when callers do not supply their own
default_stack = ScopeStack("scoped_tracing_stack")
