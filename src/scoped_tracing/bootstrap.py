"""Application bootstrap.

Loads settings, sets up logging and installs the configured default
tracer as the global tracer.
"""

from __future__ import annotations

import logging

from .core.config import Settings, load_settings
from .core.interfaces import ITracer
from .observability.logger import setup_logging
from .telemetry.global_tracer import set_global_tracer
from .telemetry.memory import MemoryTracer

logger = logging.getLogger(__name__)


def configure(settings: Settings | None = None) -> ITracer | None:
    """Wire logging and the global tracer from *settings*.

    Returns the tracer that was installed, or ``None`` for the ``none``
    backend (the global tracer is then left untouched).

    Raises:
        ConfigError: The settings name an unknown backend or log format.
    """
    if settings is None:
        settings = load_settings()
    settings.validate_backend()

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )

    tracer = _build_tracer(settings)
    if tracer is not None:
        set_global_tracer(tracer)
    logger.info(
        "Scoped tracing configured (backend=%s, service=%s)",
        settings.tracer.backend,
        settings.tracer.service_name,
    )
    return tracer


def _build_tracer(settings: Settings) -> ITracer | None:
    backend = settings.tracer.backend
    if backend == "memory":
        return MemoryTracer(service_name=settings.tracer.service_name)
    if backend == "opentracing":
        from .telemetry.opentracing_adapter import OpenTracingTracer

        return OpenTracingTracer()
    return None
