# asset_insights/middleware/__init__.py
"""
ASGI middleware.

Usage:
    from asset_insights.middleware import CorrelationIdMiddleware

    app.add_middleware(CorrelationIdMiddleware)
"""

from asset_insights.middleware.correlation import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    CorrelationIdMiddleware,
    resolve_correlation_id,
)

__all__ = [
    "CorrelationIdMiddleware",
    "resolve_correlation_id",
    "CORRELATION_ID_HEADER",
    "REQUEST_ID_HEADER",
]
