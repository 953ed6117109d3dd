"""Request context binding for structured logging.

Binds request-scoped values (correlation id, request path) and dispatch
scoped values (channel, ticket id) so they flow through every log entry
emitted inside the block.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", channel="sms"):
        logger.info("dispatch_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        request_path: HTTP request path (e.g., "/api/sms/send").
        request_method: HTTP method (e.g., "GET", "POST").
        **extra_context: Additional key-value pairs to include in logs.
            ``None`` values are skipped.

    Yields:
        None - context is bound to structlog's context vars.

    Example:
        @app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            with bind_request_context(
                correlation_id=request.headers.get("X-Correlation-ID"),
                request_path=request.url.path,
                request_method=request.method,
            ):
                return await call_next(request)
    """
    context: dict[str, Any] = {}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    if request_path is not None:
        context["request_path"] = request_path

    if request_method is not None:
        context["request_method"] = request_method

    context.update({k: v for k, v in extra_context.items() if v is not None})

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


@contextmanager
def bind_dispatch_context(**values: Any) -> Generator[None, None, None]:
    """Bind dispatch-scoped values (channel, ticket_id) without a correlation id.

    Values already bound by an enclosing block are restored on exit.
    """
    values = {k: v for k, v in values.items() if v is not None}
    with structlog.contextvars.bound_contextvars(**values):
        yield


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current logging context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context.

    Should be called at the end of request processing to prevent
    context leakage between requests.
    """
    structlog.contextvars.clear_contextvars()
