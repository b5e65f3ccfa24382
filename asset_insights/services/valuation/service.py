# asset_insights/services/valuation/service.py
"""
Valuation Service - Main orchestrator for portfolio valuation.

This is the single entry point for all valuation operations:
- get_valuation(): Current valuation, allocation and timeline in one pass
- get_history(): Dense timeline only (for charts)
- take_snapshot() / merge_snapshot(): Freeze current totals into a history

Design Principles:
- Stateless: every call receives all of its inputs; nothing is cached
  between passes, so callers simply re-invoke on any input change
- Validate at the boundary: malformed holdings are rejected before any
  computation, missing market data is degraded to zero + warning
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
- Composable: Uses specialized calculators for each task

Usage:
    from asset_insights.services.valuation import ValuationService

    service = ValuationService()

    result = service.get_valuation(
        holdings=holdings,
        rate_table={"USD": Decimal("1"), "TWD": Decimal("32")},
        market_quotes=quotes,
        timeline=timeline,
        display_currency="TWD",
    )
"""

from __future__ import annotations

import logging
from bisect import insort
from typing import Iterable, Sequence

from asset_insights.config import settings
from asset_insights.models import AssetCategory, Holding, QuoteMap, RateTable, TimelinePoint
from asset_insights.services.exceptions import InvalidHoldingError, UnsupportedCurrencyError
from asset_insights.services.valuation.calculators import AllocationAggregator, AssetValuator
from asset_insights.services.valuation.history_calculator import TimelineReconstructor
from asset_insights.services.valuation.types import (
    PortfolioValuation,
    Snapshot,
    ValuedHolding,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_HISTORY_WARNING = (
    "Fewer than two timeline points available; day change reported as 0"
)


class ValuationService:
    """
    Main service for portfolio valuation operations.

    Composes the point-in-time valuator, the timeline reconstructor and the
    allocation aggregator.

    Attributes:
        anchor_currency: Reference currency of every rate table
        supported_currencies: Display currencies accepted by this service
    """

    def __init__(
            self,
            anchor_currency: str | None = None,
            supported_currencies: Iterable[str] | None = None,
    ) -> None:
        """
        Initialize the valuation service.

        Args:
            anchor_currency: Defaults to settings.anchor_currency
            supported_currencies: Defaults to settings.supported_currencies
        """
        self.anchor_currency = (anchor_currency or settings.anchor_currency).upper()
        self.supported_currencies: tuple[str, ...] = tuple(
            code.upper()
            for code in (supported_currencies or settings.supported_currencies)
        )

        self._valuator = AssetValuator(anchor_currency=self.anchor_currency)
        self._reconstructor = TimelineReconstructor(anchor_currency=self.anchor_currency)
        self._aggregator = AllocationAggregator()

        logger.info(
            f"ValuationService initialized (anchor={self.anchor_currency}, "
            f"supported={','.join(self.supported_currencies)})"
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_valuation(
            self,
            holdings: Sequence[Holding],
            rate_table: RateTable,
            market_quotes: QuoteMap,
            timeline: Sequence[TimelinePoint] = (),
            display_currency: str | None = None,
    ) -> PortfolioValuation:
        """
        Value the whole portfolio in one pass.

        Process:
        1. Validate holdings and display currency
        2. Reconstruct the dense timeline and its forward-filled price grid
        3. Value each holding (day change from the last two filled points)
        4. Aggregate the current allocation

        Args:
            holdings: Portfolio holdings
            rate_table: Currency code -> rate against the anchor
            market_quotes: Holding id -> latest MarketQuote
            timeline: Sparse historical samples, ascending by timestamp
            display_currency: Target currency (defaults to settings)

        Returns:
            PortfolioValuation

        Raises:
            InvalidHoldingError: If a holding is malformed
            UnsupportedCurrencyError: If display_currency is not supported
        """
        display_currency = self.validate_display_currency(display_currency)
        self.validate_holdings(holdings)

        quote_currencies = self._quote_currencies(holdings, market_quotes)
        reconstructed = self._reconstructor.reconstruct_timeline(
            timeline, holdings, quote_currencies, rate_table, display_currency
        )
        tail_pair = reconstructed.tail_pair

        valued: list[ValuedHolding] = [
            self._valuator.valuate(
                holding=holding,
                market_quotes=market_quotes,
                rate_table=rate_table,
                display_currency=display_currency,
                tail_pair=tail_pair,
            )
            for holding in holdings
        ]
        allocation = self._aggregator.aggregate(valued)

        warnings = self._collect_warnings(valued)
        if tail_pair is None and any(h.is_market_priced for h in holdings):
            warnings.append(INSUFFICIENT_HISTORY_WARNING)

        result = PortfolioValuation(
            display_currency=display_currency,
            holdings=tuple(valued),
            allocation=allocation,
            snapshots=reconstructed.snapshots,
            warnings=tuple(warnings),
        )

        logger.info(
            f"Valued {len(valued)} holdings in {display_currency}: "
            f"total={result.total_value}, snapshots={len(result.snapshots)}, "
            f"warnings={len(warnings)}"
        )
        return result

    def get_history(
            self,
            holdings: Sequence[Holding],
            rate_table: RateTable,
            market_quotes: QuoteMap,
            timeline: Sequence[TimelinePoint],
            display_currency: str | None = None,
    ) -> list[Snapshot]:
        """
        Reconstruct the dense value timeline only.

        market_quotes are used solely to learn the currency each holding's
        historical prices are quoted in.

        Returns:
            One Snapshot per timeline point, in input order
        """
        display_currency = self.validate_display_currency(display_currency)
        self.validate_holdings(holdings)

        snapshots = self._reconstructor.reconstruct(
            timeline,
            holdings,
            self._quote_currencies(holdings, market_quotes),
            rate_table,
            display_currency,
        )

        logger.info(
            f"Reconstructed history for {len(holdings)} holdings: "
            f"{len(snapshots)} points in {display_currency}"
        )
        return snapshots

    @staticmethod
    def take_snapshot(valuation: PortfolioValuation, timestamp: int) -> Snapshot:
        """
        Freeze the current totals of a valuation into a Snapshot.

        category_values follow the current allocation (positive categories
        only); holding_values carry every holding's current value.
        """
        return Snapshot(
            timestamp=timestamp,
            total_value=valuation.total_value,
            category_values=dict(valuation.allocation.category_values),
            holding_values={h.id: h.value_in_display for h in valuation.holdings},
        )

    @staticmethod
    def merge_snapshot(
            history: Iterable[Snapshot],
            snapshot: Snapshot,
    ) -> tuple[Snapshot, ...]:
        """
        Insert a snapshot into a history, returning a new sorted tuple.

        The input history is not mutated. A snapshot sharing a timestamp with
        existing entries is placed after them.
        """
        merged = sorted(history, key=lambda s: s.timestamp)
        insort(merged, snapshot, key=lambda s: s.timestamp)
        return tuple(merged)

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_display_currency(self, display_currency: str | None) -> str:
        """
        Resolve and validate the display currency.

        Returns:
            Upper-cased currency code (settings default when None)

        Raises:
            UnsupportedCurrencyError: If the code is not supported
        """
        code = (display_currency or settings.default_display_currency).strip().upper()
        if code not in self.supported_currencies:
            raise UnsupportedCurrencyError(code, self.supported_currencies)
        return code

    @staticmethod
    def validate_holdings(holdings: Sequence[Holding]) -> None:
        """
        Reject holdings that would corrupt sums.

        Raises:
            InvalidHoldingError: On empty or duplicate id, unknown category,
                                 or a negative / non-finite amount
        """
        seen: set[str] = set()

        for holding in holdings:
            if not holding.id:
                raise InvalidHoldingError("", "id must not be empty", field="id")
            if holding.id in seen:
                raise InvalidHoldingError(holding.id, "duplicate id", field="id")
            seen.add(holding.id)

            if not isinstance(holding.category, AssetCategory):
                raise InvalidHoldingError(
                    holding.id, f"unknown category {holding.category!r}", field="category"
                )

            amount = holding.amount
            if not amount.is_finite():
                raise InvalidHoldingError(
                    holding.id, f"amount must be finite, got {amount}",
                    field="amount",
                )
            if amount < 0:
                raise InvalidHoldingError(
                    holding.id, f"amount must be >= 0, got {amount}", field="amount"
                )

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _quote_currencies(
            self,
            holdings: Sequence[Holding],
            market_quotes: QuoteMap,
    ) -> dict[str, str]:
        """Holding id -> currency its market prices are quoted in."""
        currencies: dict[str, str] = {}
        for holding in holdings:
            if not holding.is_market_priced:
                continue
            quote = market_quotes.get(holding.id)
            currencies[holding.id] = (
                quote.currency if quote is not None and quote.currency
                else self.anchor_currency
            )
        return currencies

    @staticmethod
    def _collect_warnings(valued: Iterable[ValuedHolding]) -> list[str]:
        """De-duplicate warnings, keeping first-seen order."""
        warnings: list[str] = []
        for valued_holding in valued:
            for warning in valued_holding.warnings:
                if warning not in warnings:
                    warnings.append(warning)
        return warnings
