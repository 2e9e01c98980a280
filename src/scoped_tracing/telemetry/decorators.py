"""Decorator that runs a callable inside a :class:`ScopedTracingContext`."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable

from scoped_tracing.core.interfaces import ITracer
from scoped_tracing.telemetry.context import ScopedTracingContext
from scoped_tracing.telemetry.spans import ScopeStack

CallableT = Callable[..., Any]
DecoratorT = Callable[[CallableT], CallableT]


def traced(
    operation_name: str | CallableT | None = None,
    *,
    tracer: ITracer | None = None,
    stack: ScopeStack | None = None,
) -> Any:
    """Trace every call of the decorated function as its own span.

    The span is named *operation_name*, or the function's ``__qualname__``
    when omitted, and is a child of whatever span is current at call time.
    Works on plain and ``async`` functions, and bare (``@traced``) or
    called (``@traced("name")``).

    Generators (sync and async) open their span on the first step of
    iteration and close it when exhausted or closed.  The span stays on
    the stack between steps, so a generator must be driven to completion
    under the same scopes it started in.
    """
    if callable(operation_name):
        return traced()(operation_name)

    def decorator(func: CallableT) -> CallableT:
        name = operation_name or func.__qualname__

        if inspect.isasyncgenfunction(func):
            @functools.wraps(func)
            async def async_gen_wrapper(*args: Any, **kwargs: Any) -> Any:
                with ScopedTracingContext(name, tracer=tracer, stack=stack):
                    async for item in func(*args, **kwargs):
                        yield item

            return async_gen_wrapper

        if inspect.isgeneratorfunction(func):
            @functools.wraps(func)
            def gen_wrapper(*args: Any, **kwargs: Any) -> Any:
                with ScopedTracingContext(name, tracer=tracer, stack=stack):
                    return (yield from func(*args, **kwargs))

            return gen_wrapper

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with ScopedTracingContext(name, tracer=tracer, stack=stack):
                return await func(*args, **kwargs)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with ScopedTracingContext(name, tracer=tracer, stack=stack):
                return func(*args, **kwargs)

        return async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper

    return decorator
