"""Custom exception hierarchy for scoped tracing."""


class TracingError(Exception):
    """Base exception for all scoped tracing errors."""


# --- Configuration ---
class ConfigError(TracingError):
    """Invalid or missing configuration."""


class NoTracerConfigured(TracingError):
    """No tracer on the scope stack and no global tracer installed."""

    def __init__(self, message: str = "No Tracer set.") -> None:
        super().__init__(message)


# --- Scope lifecycle ---
class ScopeViolation(TracingError):
    """A scope was closed while another scope sat on top of the stack."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
