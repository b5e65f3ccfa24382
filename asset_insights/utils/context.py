# asset_insights/utils/context.py
"""
Request-scoped context.

Holds the correlation ID of the request being served. contextvars keep it
isolated per request, including across await points and threadpool
handoffs made by Starlette.

Usage:
    from asset_insights.utils.context import get_correlation_id

    logger.info(f"[{get_correlation_id()}] valuing portfolio")
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Correlation ID of the current request, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set by CorrelationIdMiddleware when a request starts."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Reset by CorrelationIdMiddleware when a request ends."""
    _correlation_id_var.set(None)
