# asset_insights/services/valuation/calculators.py
"""
Point-in-time valuation calculators.

Each calculator follows the Single Responsibility Principle:
- holding_value(): Display-currency value of a holding at a given unit price
- AssetValuator: Values one holding against the latest quotes
- AllocationAggregator: Sums valuations by category

Design Principles:
- Stateless (no instance state beyond configuration)
- Receives all market data explicitly
- Never raises on missing data: degrades to zero and records a warning
- All currency math goes through utils.fx_conversion.convert

Usage:
    valuator = AssetValuator()
    valued = valuator.valuate(
        holding=holding,
        market_quotes={"a": MarketQuote(price=Decimal("5"), currency="USD")},
        rate_table={"USD": Decimal("1"), "TWD": Decimal("32")},
        display_currency="TWD",
    )
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from asset_insights.models import AssetCategory, Holding, QuoteMap, RateTable
from asset_insights.services.constants import DEFAULT_ANCHOR_CURRENCY, ONE, PERCENT, ZERO
from asset_insights.services.valuation.types import (
    AllocationSummary,
    FilledPoint,
    Snapshot,
    ValuedHolding,
)
from asset_insights.utils.fx_conversion import convert, missing_currencies, to_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# SHARED VALUATION RULE
# =============================================================================

def holding_value(
        holding: Holding,
        unit_price: Decimal,
        price_currency: str,
        display_currency: str,
        rate_table: RateTable,
) -> Decimal:
    """
    Display-currency value of a holding at a given native unit price.

    Market-priced: amount × convert(unit_price, price_currency, display)
    Face-value:    convert(amount, holding.currency, display)

    unit_price and price_currency are ignored for face-value holdings: their
    amount is already money in holding.currency.
    """
    if holding.is_market_priced:
        return holding.amount * convert(unit_price, price_currency, display_currency, rate_table)
    return convert(holding.amount, holding.currency, display_currency, rate_table)


# =============================================================================
# ASSET VALUATOR
# =============================================================================

class AssetValuator:
    """
    Values a single holding in the display currency.

    Resolves the native price and currency from the quote map, converts to
    the display currency and, for market-priced holdings, derives the day
    change from the last two forward-filled timeline points.

    Missing data handling:
        - No quote: native price 0 in the anchor currency (value 0)
        - No rate: conversion uses rate 1
        - Fewer than two points, or no price at either: day change 0
        - Previous price 0: day change percent 0
    """

    def __init__(self, anchor_currency: str = DEFAULT_ANCHOR_CURRENCY) -> None:
        """
        Args:
            anchor_currency: Currency assumed for quotes that don't carry one
        """
        self._anchor_currency = anchor_currency

    def valuate(
            self,
            holding: Holding,
            market_quotes: QuoteMap,
            rate_table: RateTable,
            display_currency: str,
            tail_pair: tuple[FilledPoint, FilledPoint] | None = None,
    ) -> ValuedHolding:
        """
        Value one holding.

        Args:
            holding: Holding to value
            market_quotes: Holding id -> latest MarketQuote
            rate_table: Currency code -> rate against the anchor
            display_currency: Target currency for all outputs
            tail_pair: (previous, last) forward-filled timeline points

        Returns:
            ValuedHolding (never raises for missing data)
        """
        if holding.is_market_priced:
            return self._valuate_market(
                holding, market_quotes, rate_table, display_currency, tail_pair
            )
        return self._valuate_face_value(holding, rate_table, display_currency)

    def _valuate_market(
            self,
            holding: Holding,
            market_quotes: QuoteMap,
            rate_table: RateTable,
            display_currency: str,
            tail_pair: tuple[FilledPoint, FilledPoint] | None,
    ) -> ValuedHolding:
        warnings: list[str] = []

        quote = market_quotes.get(holding.id)
        if quote is None:
            native_price = ZERO
            native_currency = self._anchor_currency
            warnings.append(f"No market quote for {holding.label}; valued at 0")
            logger.debug(f"Missing quote for holding {holding.id}")
        else:
            native_price = to_decimal(quote.price)
            native_currency = quote.currency or self._anchor_currency

        warnings.extend(self._rate_warnings(rate_table, native_currency, display_currency))

        price_in_display = convert(native_price, native_currency, display_currency, rate_table)
        value_in_display = holding_value(
            holding, native_price, native_currency, display_currency, rate_table
        )

        day_change, day_change_pct = self._day_change(
            holding, native_currency, display_currency, rate_table, tail_pair
        )

        return ValuedHolding(
            holding=holding,
            display_currency=display_currency,
            native_price=native_price,
            native_currency=native_currency,
            price_in_display=price_in_display,
            value_in_display=value_in_display,
            day_change_in_display=day_change,
            day_change_percent=day_change_pct,
            warnings=tuple(warnings),
        )

    def _valuate_face_value(
            self,
            holding: Holding,
            rate_table: RateTable,
            display_currency: str,
    ) -> ValuedHolding:
        warnings = self._rate_warnings(rate_table, holding.currency, display_currency)

        return ValuedHolding(
            holding=holding,
            display_currency=display_currency,
            native_price=ONE,
            native_currency=holding.currency,
            price_in_display=convert(ONE, holding.currency, display_currency, rate_table),
            value_in_display=holding_value(
                holding, ONE, holding.currency, display_currency, rate_table
            ),
            warnings=tuple(warnings),
        )

    def _day_change(
            self,
            holding: Holding,
            native_currency: str,
            display_currency: str,
            rate_table: RateTable,
            tail_pair: tuple[FilledPoint, FilledPoint] | None,
    ) -> tuple[Decimal, Decimal]:
        """
        Day-over-day change from the last two filled points.

        change  = amount × convert(last - prev, native, display)
        percent = (last - prev) / prev × 100

        Returns:
            (change_in_display, change_percent), both 0 when unavailable
        """
        if tail_pair is None:
            return ZERO, ZERO

        previous, last = tail_pair
        prev_price = previous.prices.get(holding.id)
        last_price = last.prices.get(holding.id)
        if prev_price is None or last_price is None:
            return ZERO, ZERO

        delta = last_price - prev_price
        change = holding.amount * convert(delta, native_currency, display_currency, rate_table)

        # Guard against division by zero
        if prev_price == ZERO:
            return change, ZERO
        return change, delta / prev_price * PERCENT

    def _rate_warnings(
            self,
            rate_table: RateTable,
            from_currency: str,
            to_currency: str,
    ) -> list[str]:
        """Warn about rates that will silently fall back to 1."""
        if from_currency == to_currency:
            return []
        missing = [
            currency
            for currency in missing_currencies(rate_table, (from_currency, to_currency))
            if currency != self._anchor_currency
        ]
        return [f"No exchange rate for {currency}; assuming 1" for currency in missing]


# =============================================================================
# ALLOCATION AGGREGATOR
# =============================================================================

class AllocationAggregator:
    """
    Groups valuations by category.

    The result only lists categories with a positive value (pie charts have
    no use for empty slices), while total_value always sums everything.
    Categories are emitted in AssetCategory declaration order, so the
    result does not depend on input order.
    """

    def aggregate(self, valued_holdings: Iterable[ValuedHolding]) -> AllocationSummary:
        """
        Sum current valuations by category.

        Args:
            valued_holdings: Output of AssetValuator for one pass

        Returns:
            AllocationSummary with per-category and total values
        """
        return self._summarize(
            (v.category, v.value_in_display) for v in valued_holdings
        )

    def aggregate_snapshot(self, snapshot: Snapshot) -> AllocationSummary:
        """Category breakdown of one historical Snapshot."""
        return self._summarize(snapshot.category_values.items())

    @staticmethod
    def _summarize(
            values: Iterable[tuple[AssetCategory, Decimal]],
    ) -> AllocationSummary:
        totals: dict[AssetCategory, Decimal] = {}
        total_value = ZERO

        for category, value in values:
            totals[category] = totals.get(category, ZERO) + value
            total_value += value

        category_values = {
            category: totals[category]
            for category in AssetCategory
            if totals.get(category, ZERO) > ZERO
        }
        return AllocationSummary(category_values=category_values, total_value=total_value)
