"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

from menu_admin_service.exceptions import MenuAdminError

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    if isinstance(error, MenuAdminError):
        # Client-facing errors carry a status and a safe message
        span.set_attribute("error.status_code", error.status_code)
        span.set_attribute("error.message", error.message)
    else:
        span.record_exception(error)


def traced(span_name: str | None = None, service_name: str = "menu-admin-svc") -> Callable[[F], F]:
    """Decorator to run a function inside an OpenTelemetry span.

    Sync and async functions are supported. Errors from the service's own
    taxonomy are tagged with their HTTP status; anything else is recorded as
    an exception event on the span. Errors are always re-raised.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Tracer name and service.name span attribute

    Returns:
        Decorated function with tracing

    Example:
        @traced("menu_create_item")
        async def create_item(self, payload: MenuItemPayload) -> MenuItem:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with tracer.start_as_current_span(name, record_exception=False) as span:
                    span.set_attribute("service.name", service_name)
                    span.set_attribute("function.name", func.__name__)
                    try:
                        result = await func(*args, **kwargs)
                    except Exception as e:
                        _record_failure(span, e)
                        raise
                    span.set_attribute("success", True)
                    return result

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name, record_exception=False) as span:
                span.set_attribute("service.name", service_name)
                span.set_attribute("function.name", func.__name__)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        return sync_wrapper  # type: ignore

    return decorator
