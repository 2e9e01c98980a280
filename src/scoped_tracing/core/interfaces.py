"""Protocol interfaces for the tracing backend.

The scope stack never talks to a concrete backend.  Anything that can
build, start and finish spans through these capabilities can be
plugged in (in-memory, opentracing, test doubles).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ISpan(Protocol):
    """A started span.  Finishing it ends its duration."""

    def finish(self) -> None: ...


@runtime_checkable
class ISpanBuilder(Protocol):
    """Configures a span before it is started."""

    def as_child_of(self, parent: ISpan) -> ISpanBuilder: ...

    def start(self) -> ISpan: ...


@runtime_checkable
class ITracer(Protocol):
    """Creates span builders, typically bound to a tracing backend."""

    def build_span(self, operation_name: str) -> ISpanBuilder: ...
