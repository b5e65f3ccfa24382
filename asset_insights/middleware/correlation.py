# asset_insights/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

Every request gets an ID that shows up in each log line written while
serving it and in the X-Correlation-ID response header.

ID sources, in order:
1. X-Correlation-ID request header
2. X-Request-ID request header
3. A fresh UUID4

Client-supplied IDs longer than MAX_CORRELATION_ID_LENGTH are replaced by a
fresh UUID so they cannot bloat every log line.

Usage:
    app.add_middleware(CorrelationIdMiddleware)

    curl -H "X-Correlation-ID: trace-123" http://localhost:8000/health
    # < X-Correlation-ID: trace-123
"""

import logging
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from asset_insights.utils.context import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
MAX_CORRELATION_ID_LENGTH = 128


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds a correlation ID to the request context and echoes it back."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = resolve_correlation_id(
            request.headers.get(CORRELATION_ID_HEADER),
            request.headers.get(REQUEST_ID_HEADER),
        )
        set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()


def resolve_correlation_id(*candidates: str | None) -> str:
    """
    First usable candidate ID, or a new UUID4.

    Blank and over-long candidates are skipped.
    """
    for candidate in candidates:
        if candidate is None:
            continue
        candidate = candidate.strip()
        if not candidate:
            continue
        if len(candidate) > MAX_CORRELATION_ID_LENGTH:
            logger.debug(
                f"Ignoring correlation ID of length {len(candidate)} "
                f"(max {MAX_CORRELATION_ID_LENGTH})"
            )
            continue
        return candidate
    return str(uuid.uuid4())
