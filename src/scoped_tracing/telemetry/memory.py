"""In-memory tracing backend.

Records every span it starts and finishes, including the parent link
passed through ``as_child_of``.  Useful in tests and for local
inspection; nothing is exported anywhere.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any

from scoped_tracing.core.errors import TracingError
from scoped_tracing.core.ids import new_id, utc_now
from scoped_tracing.core.interfaces import ISpan


class MemorySpan:
    """Span recorded by a :class:`MemoryTracer`."""

    def __init__(
        self,
        tracer: MemoryTracer,
        operation_name: str,
        parent: ISpan | None,
        tags: dict[str, Any],
    ) -> None:
        self.tracer = tracer
        self.operation_name = operation_name
        self.parent = parent
        self.tags = tags
        self.span_id = new_id()
        # Spans from other backends do not carry a trace id to inherit
        self.trace_id: str = getattr(parent, "trace_id", None) or new_id()
        self.start_time: datetime = utc_now()
        self.finish_time: datetime | None = None

    @property
    def finished(self) -> bool:
        return self.finish_time is not None

    @property
    def parent_id(self) -> str | None:
        return getattr(self.parent, "span_id", None)

    def set_tag(self, key: str, value: Any) -> MemorySpan:
        self.tags[key] = value
        return self

    def finish(self) -> None:
        if self.finish_time is not None:
            raise TracingError(f"Span {self.operation_name!r} already finished.")
        self.finish_time = utc_now()
        self.tracer._record_finished(self)

    def __repr__(self) -> str:
        return (
            f"MemorySpan(operation_name={self.operation_name!r}, "
            f"span_id={self.span_id!r}, parent_id={self.parent_id!r})"
        )


class MemorySpanBuilder:
    """Builder returned by :meth:`MemoryTracer.build_span`."""

    def __init__(self, tracer: MemoryTracer, operation_name: str) -> None:
        self._tracer = tracer
        self._operation_name = operation_name
        self._parent: ISpan | None = None
        self._tags: dict[str, Any] = {}

    def as_child_of(self, parent: ISpan) -> MemorySpanBuilder:
        self._parent = parent
        return self

    def with_tag(self, key: str, value: Any) -> MemorySpanBuilder:
        self._tags[key] = value
        return self

    def start(self) -> MemorySpan:
        span = MemorySpan(
            self._tracer, self._operation_name, self._parent, dict(self._tags),
        )
        self._tracer._record_started(span)
        return span


class MemoryTracer:
    """Tracer that keeps started and finished spans in memory.

    Parameters
    ----------
    service_name:
        Stored as the ``service`` tag on every span.
    """

    def __init__(self, service_name: str = "scoped-tracing") -> None:
        self.service_name = service_name
        self._lock = threading.Lock()
        self._started: list[MemorySpan] = []
        self._finished: list[MemorySpan] = []

    def build_span(self, operation_name: str) -> MemorySpanBuilder:
        return MemorySpanBuilder(self, operation_name).with_tag(
            "service", self.service_name,
        )

    # -- inspection -----------------------------------------------------------

    @property
    def started_spans(self) -> list[MemorySpan]:
        """Spans in start order."""
        with self._lock:
            return list(self._started)

    @property
    def finished_spans(self) -> list[MemorySpan]:
        """Spans in finish order."""
        with self._lock:
            return list(self._finished)

    def reset(self) -> None:
        with self._lock:
            self._started.clear()
            self._finished.clear()

    # -- internal -------------------------------------------------------------

    def _record_started(self, span: MemorySpan) -> None:
        with self._lock:
            self._started.append(span)

    def _record_finished(self, span: MemorySpan) -> None:
        with self._lock:
            self._finished.append(span)

    def __repr__(self) -> str:
        return f"MemoryTracer(service_name={self.service_name!r})"
