# asset_insights/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging setup with correlation ID support
- context: Request-scoped correlation ID
- fx_conversion: Rate-table currency conversion
- date_utils: Timestamp / calendar date helpers

Usage:
    from asset_insights.utils import setup_logging, get_logger
    from asset_insights.utils import get_correlation_id
    from asset_insights.utils.fx_conversion import convert
"""

from asset_insights.utils.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from asset_insights.utils.logging import get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
