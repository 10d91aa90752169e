"""OpenTelemetry tracing decorators."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def traced(
    span_name: str | None = None,
    service_name: str = "sales-tally-svc",
    attribute_args: tuple[str, ...] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a synchronous function.

    Creates a span around each call and records the outcome. Keyword
    arguments named in ``attribute_args`` are copied onto the span when they
    hold primitive values.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes
        attribute_args: Keyword argument names to record as span attributes

    Returns:
        Decorated function with tracing

    Example:
        @traced("record_sale", attribute_args=("dish_id", "delta"))
        def record_sale(self, dish_id: str, delta: int) -> int:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                if span_name:
                    span.set_attribute("function.name", func.__name__)

                for arg_name in attribute_args:
                    value = kwargs.get(arg_name)
                    if isinstance(value, (str, int, float, bool)):
                        span.set_attribute(f"arg.{arg_name}", value)

                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error.type", type(e).__name__)
                    span.record_exception(e)
                    raise
                span.set_attribute("success", True)
                return result

        return wrapper  # type: ignore

    return decorator
