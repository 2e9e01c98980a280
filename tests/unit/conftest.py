"""Unit-test isolation: no global tracer or logging setup leaks between tests."""

from __future__ import annotations

import logging

import pytest

from scoped_tracing.observability.logger import reset_logging
from scoped_tracing.telemetry.global_tracer import reset_global_tracer
from scoped_tracing.telemetry.spans import default_stack


@pytest.fixture(autouse=True)
def _clean_global_state():
    root_level = logging.getLogger().level
    reset_global_tracer()
    yield
    reset_global_tracer()
    reset_logging()
    logging.getLogger().setLevel(root_level)
    assert default_stack.depth == 0, "test leaked frames on the default stack"
