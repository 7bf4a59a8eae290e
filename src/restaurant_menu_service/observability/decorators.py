"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "restaurant-menu-svc"


@contextmanager
def _recorded_span(tracer: trace.Tracer, name: str, func_name: str) -> Iterator[Span]:
    """Open a span that records success or the raised exception."""
    with tracer.start_as_current_span(name, record_exception=False) as span:
        span.set_attribute("service.name", SERVICE_NAME)
        span.set_attribute("function.name", func_name)
        try:
            yield span
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise
        span.set_attribute("success", True)


def traced(span_name: str | None = None) -> Callable[[F], F]:
    """Decorator that wraps a service operation in an OpenTelemetry span.

    Works for both coroutine functions and plain functions. Exceptions are
    recorded on the span and re-raised unchanged.

    Args:
        span_name: Name for the span (defaults to the function name)

    Example:
        @traced("customers.register")
        async def register(self, customer: CustomerCreate) -> Customer:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(SERVICE_NAME)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _recorded_span(tracer, name, func.__name__):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _recorded_span(tracer, name, func.__name__):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore

    return decorator
