# asset_insights/services/market_data/__init__.py
"""
Market data normalization package.

Turns fetcher outputs (symbol-keyed price tables, per-symbol history
series, raw exchange rates) into the inputs the valuation engine expects.

Usage:
    from asset_insights.services.market_data import (
        build_market_quotes,
        merge_price_series,
        resolve_rate_table,
    )
"""

from asset_insights.services.market_data.normalization import (
    build_market_quotes,
    format_provider_symbol,
    merge_price_series,
    resolve_rate_table,
)

__all__ = [
    "format_provider_symbol",
    "build_market_quotes",
    "merge_price_series",
    "resolve_rate_table",
]
