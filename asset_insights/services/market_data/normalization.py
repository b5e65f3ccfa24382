# asset_insights/services/market_data/normalization.py
"""
Normalization of market data collaborator outputs.

The fetchers (quote API, crypto API, exchange-rate feed, history provider)
return symbol-keyed tables and per-symbol price series. The valuation
engine works on holding ids. These adapters bridge the two shapes without
doing any I/O themselves.

Provider symbol conventions:
    Crypto:          BTC  -> BTC-USD
    Taiwan listings: 2330 -> 2330.TW   (all-digit tickers)
    Everything else: upper-cased as-is
"""

import logging
from decimal import Decimal
from typing import Iterable, Mapping

from asset_insights.models import AssetCategory, Holding, MarketQuote, TimelinePoint
from asset_insights.services.constants import DEFAULT_ANCHOR_CURRENCY, ONE
from asset_insights.utils.fx_conversion import to_decimal

logger = logging.getLogger(__name__)

CRYPTO_QUOTE_SUFFIX = "-USD"
TAIWAN_EXCHANGE_SUFFIX = ".TW"

PriceTable = Mapping[str, Decimal | float | int]
PriceSeries = Iterable[tuple[int, Decimal | float | int | None]]


def format_provider_symbol(symbol: str, category: AssetCategory) -> str:
    """
    Build the history provider symbol for a holding's ticker.

    Examples:
        >>> format_provider_symbol("btc", AssetCategory.CRYPTO)
        'BTC-USD'
        >>> format_provider_symbol("2330", AssetCategory.EQUITY)
        '2330.TW'
        >>> format_provider_symbol("nvda", AssetCategory.EQUITY)
        'NVDA'
    """
    upper = symbol.strip().upper()
    if category == AssetCategory.CRYPTO:
        return f"{upper}{CRYPTO_QUOTE_SUFFIX}"
    if upper.isdigit():
        return f"{upper}{TAIWAN_EXCHANGE_SUFFIX}"
    return upper


def build_market_quotes(
        holdings: Iterable[Holding],
        stock_prices: PriceTable,
        crypto_prices: PriceTable,
        quote_currency: str = DEFAULT_ANCHOR_CURRENCY,
) -> dict[str, MarketQuote]:
    """
    Map symbol-keyed price tables onto holding ids.

    Args:
        holdings: Portfolio holdings
        stock_prices: Upper-cased ticker -> latest price (equity)
        crypto_prices: Upper-cased coin symbol -> latest price (crypto)
        quote_currency: Currency both tables are quoted in

    Returns:
        Holding id -> MarketQuote. Face-value holdings, holdings without a
        symbol and symbols absent from their table get no entry.
    """
    stock_table = {key.upper(): value for key, value in stock_prices.items()}
    crypto_table = {key.upper(): value for key, value in crypto_prices.items()}

    quotes: dict[str, MarketQuote] = {}
    for holding in holdings:
        if not holding.is_market_priced or not holding.symbol:
            continue

        table = crypto_table if holding.category == AssetCategory.CRYPTO else stock_table
        price = table.get(holding.symbol.strip().upper())
        if price is None:
            logger.debug(f"No price for symbol {holding.symbol} (holding {holding.id})")
            continue

        quotes[holding.id] = MarketQuote(price=to_decimal(price), currency=quote_currency)

    return quotes


def merge_price_series(
        series_by_holding: Mapping[str, PriceSeries],
) -> list[TimelinePoint]:
    """
    Merge per-holding price series into one sparse timeline.

    Args:
        series_by_holding: Holding id -> [(timestamp, price or None), ...]

    Returns:
        TimelinePoints sorted by timestamp; samples sharing a timestamp are
        merged into one point and None prices are dropped
    """
    merged: dict[int, dict[str, Decimal]] = {}

    for holding_id, series in series_by_holding.items():
        for timestamp, price in series:
            if price is None:
                continue
            merged.setdefault(int(timestamp), {})[holding_id] = to_decimal(price)

    return [
        TimelinePoint(timestamp=timestamp, assets=merged[timestamp])
        for timestamp in sorted(merged)
    ]


def resolve_rate_table(
        rates: Mapping[str, Decimal | float | int] | None,
        fallback: Mapping[str, Decimal],
        anchor_currency: str = DEFAULT_ANCHOR_CURRENCY,
) -> dict[str, Decimal]:
    """
    Pick the rate table for a valuation pass.

    Uses the supplied rates when present (non-empty), otherwise the
    configured fallback. Codes are upper-cased and the anchor's rate is
    always forced to 1.
    """
    source: Mapping[str, Decimal | float | int] = rates if rates else fallback
    if not rates:
        logger.info("No exchange rates supplied; using fallback rate table")

    table = {code.upper(): to_decimal(rate) for code, rate in source.items()}
    table[anchor_currency.upper()] = ONE
    return table

