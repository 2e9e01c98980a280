"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

# Default tracer backends ``bootstrap.configure`` knows how to build
TRACER_BACKENDS = ("none", "memory", "opentracing")


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


class TracerConfig(BaseModel):
    backend: str = "none"  # none, memory, opentracing
    service_name: str = "scoped-tracing"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    tracer: TracerConfig = Field(default_factory=TracerConfig)

    model_config = {"env_prefix": "SCOPED_TRACING_", "env_nested_delimiter": "__"}

    def validate_backend(self) -> None:
        """Reject tracer backends nothing knows how to build."""
        from .errors import ConfigError

        if self.tracer.backend not in TRACER_BACKENDS:
            raise ConfigError(
                f"Unknown tracer backend {self.tracer.backend!r}; "
                f"expected one of {', '.join(TRACER_BACKENDS)}."
            )
        if self.observability.log_format not in ("json", "console"):
            raise ConfigError(
                f"Unknown log format {self.observability.log_format!r}."
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return Settings(**data)
