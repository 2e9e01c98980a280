"""Shared fixtures for the scoped-tracing test suite."""

from __future__ import annotations

import pytest

from scoped_tracing.telemetry.memory import MemoryTracer
from scoped_tracing.telemetry.spans import ScopeStack


@pytest.fixture
def stack() -> ScopeStack:
    """Return a fresh, empty stack isolated from the package default."""
    return ScopeStack("test_stack")


@pytest.fixture
def tracer() -> MemoryTracer:
    """Return an in-memory tracer with no recorded spans."""
    return MemoryTracer(service_name="test")
