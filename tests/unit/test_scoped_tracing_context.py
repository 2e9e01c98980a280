"""Unit tests for ScopedTracingContext construction variants and close."""

from __future__ import annotations

import pytest

from scoped_tracing.core.errors import NoTracerConfigured, ScopeViolation
from scoped_tracing.telemetry.context import (
    ScopedTracingContext,
    current_span,
    current_tracer,
)
from scoped_tracing.telemetry.global_tracer import set_global_tracer
from scoped_tracing.telemetry.memory import MemoryTracer


class _FailingSpan:
    def finish(self) -> None:
        raise RuntimeError("backend down")


class TestConstructionVariants:
    def test_operation_name_uses_global_tracer(self, stack, tracer):
        set_global_tracer(tracer)
        with ScopedTracingContext("root", stack=stack) as ctx:
            assert ctx.span.operation_name == "root"
            assert ctx.span.parent is None
            assert ctx.tracer is None
            assert stack.effective_span() is ctx.span
        assert ctx.span.finished

    def test_operation_name_is_child_of_current_span(self, stack, tracer):
        with ScopedTracingContext("outer", tracer=tracer, stack=stack) as outer:
            with ScopedTracingContext("inner", stack=stack) as inner:
                assert inner.span.parent is outer.span
                assert inner.span.trace_id == outer.span.trace_id

    def test_explicit_span_is_adopted_not_reparented(self, stack, tracer):
        orphan = tracer.build_span("orphan").start()
        with ScopedTracingContext("outer", tracer=tracer, stack=stack):
            with ScopedTracingContext.for_span(orphan, stack=stack) as ctx:
                assert ctx.span is orphan
                assert orphan.parent is None
                assert stack.effective_span() is orphan
        assert orphan.finished

    def test_builder_is_parented_and_started(self, stack, tracer):
        with ScopedTracingContext("outer", tracer=tracer, stack=stack) as outer:
            builder = tracer.build_span("built").with_tag("k", "v")
            with ScopedTracingContext.for_builder(builder, stack=stack) as ctx:
                assert ctx.span.operation_name == "built"
                assert ctx.span.parent is outer.span
                assert ctx.span.tags["k"] == "v"

    def test_builder_without_current_span_is_root(self, stack, tracer):
        set_global_tracer(tracer)
        with ScopedTracingContext(builder=tracer.build_span("b"), stack=stack) as ctx:
            assert ctx.span.parent is None

    def test_tracer_only_pushes_no_span(self, stack, tracer):
        with ScopedTracingContext.for_tracer(tracer, stack=stack) as ctx:
            assert ctx.span is None
            assert stack.effective_tracer() is tracer
            assert stack.effective_span() is None
        assert tracer.started_spans == []

    def test_tracer_and_operation_name(self, stack, tracer):
        set_global_tracer(MemoryTracer("global"))
        with ScopedTracingContext("op", tracer=tracer, stack=stack) as ctx:
            assert ctx.tracer is tracer
            assert ctx.span.tracer is tracer
            assert stack.effective_tracer() is tracer

    def test_tracer_and_explicit_span(self, stack, tracer):
        other = MemoryTracer("other")
        span = other.build_span("foreign").start()
        with ScopedTracingContext(tracer=tracer, span=span, stack=stack):
            assert stack.effective_tracer() is tracer
            assert stack.effective_span() is span

    def test_tracer_and_builder(self, stack, tracer):
        with ScopedTracingContext("outer", tracer=tracer, stack=stack) as outer:
            other = MemoryTracer("other")
            with ScopedTracingContext(
                tracer=other, builder=other.build_span("x"), stack=stack,
            ) as ctx:
                assert ctx.span.tracer is other
                assert ctx.span.parent is outer.span

    def test_each_variant_pushes_exactly_one_frame(self, stack, tracer):
        with ScopedTracingContext("a", tracer=tracer, stack=stack):
            assert stack.depth == 1
            with ScopedTracingContext.for_tracer(tracer, stack=stack):
                assert stack.depth == 2
        assert stack.depth == 0


class TestConstructionErrors:
    def test_no_tracer_configured(self, stack):
        with pytest.raises(NoTracerConfigured, match="No Tracer set"):
            ScopedTracingContext("op", stack=stack)
        assert stack.depth == 0

    def test_explicit_span_still_requires_a_tracer(self, stack, tracer):
        span = tracer.build_span("s").start()
        with pytest.raises(NoTracerConfigured):
            ScopedTracingContext.for_span(span, stack=stack)
        assert stack.depth == 0

    def test_conflicting_sources_rejected(self, stack, tracer):
        span = tracer.build_span("s").start()
        with pytest.raises(ValueError):
            ScopedTracingContext("op", span=span, tracer=tracer, stack=stack)
        assert stack.depth == 0

    def test_nothing_to_bind_rejected(self, stack):
        with pytest.raises(TypeError):
            ScopedTracingContext(stack=stack)


class TestClose:
    def test_close_out_of_order_span_scopes(self, stack, tracer):
        a = ScopedTracingContext("a", tracer=tracer, stack=stack)
        b = ScopedTracingContext("b", stack=stack)

        with pytest.raises(ScopeViolation, match="Unexpected Span found"):
            a.close()
        assert stack.depth == 2
        assert not a.span.finished
        assert not a.closed

        b.close()
        a.close()
        assert stack.depth == 0
        assert [s.operation_name for s in tracer.finished_spans] == ["b", "a"]

    def test_close_out_of_order_tracer_scopes(self, stack, tracer):
        a = ScopedTracingContext.for_tracer(tracer, stack=stack)
        b = ScopedTracingContext.for_tracer(MemoryTracer("other"), stack=stack)

        with pytest.raises(ScopeViolation, match="Unexpected Tracer set"):
            a.close()
        b.close()
        a.close()
        assert stack.depth == 0

    def test_close_under_scope_binding_neither_value(self, stack, tracer):
        a = ScopedTracingContext("a", tracer=tracer, stack=stack)
        b = ScopedTracingContext.for_tracer(tracer, stack=stack)

        with pytest.raises(ScopeViolation, match="out of order"):
            a.close()
        assert stack.depth == 2
        b.close()
        a.close()

    def test_double_close_raises(self, stack, tracer):
        ctx = ScopedTracingContext("a", tracer=tracer, stack=stack)
        ctx.close()
        with pytest.raises(ScopeViolation, match="already closed"):
            ctx.close()
        assert len(tracer.finished_spans) == 1

    def test_exception_in_body_still_closes(self, stack, tracer):
        with pytest.raises(KeyError):
            with ScopedTracingContext("boom", tracer=tracer, stack=stack):
                raise KeyError("x")
        assert stack.depth == 0
        assert tracer.finished_spans[0].operation_name == "boom"

    def test_failing_finish_still_pops(self, stack, tracer):
        ctx = ScopedTracingContext(tracer=tracer, span=_FailingSpan(), stack=stack)
        with pytest.raises(RuntimeError, match="backend down"):
            ctx.close()
        assert stack.depth == 0
        assert ctx.closed


class TestReaders:
    def test_current_values_follow_default_stack(self, tracer):
        assert current_span() is None
        with ScopedTracingContext("op", tracer=tracer) as ctx:
            assert current_tracer() is tracer
            assert current_span() is ctx.span
        assert current_tracer() is None

    def test_readers_accept_explicit_stack(self, stack, tracer):
        with ScopedTracingContext("op", tracer=tracer, stack=stack) as ctx:
            assert current_span(stack) is ctx.span
            assert current_span() is None
