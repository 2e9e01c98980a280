"""Core types shared by every scoped tracing module."""
