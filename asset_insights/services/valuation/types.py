# asset_insights/services/valuation/types.py
"""
Derived data types produced by the valuation engine.

These dataclasses are internal results. They are NOT Pydantic schemas -
those are defined in asset_insights/schemas/valuation.py for API
serialization.

Design Principles:
- Immutable (frozen=True): a result is created once per valuation pass and
  replaced wholesale on the next one
- Decimal for all money values
- Missing market data degrades to zero values plus a warning, never None

Type Hierarchy:
    ValuedHolding        - One holding valued in the display currency
    FilledPoint          - Forward-filled native prices at one timeline point
    Snapshot             - One point of the dense portfolio value timeline
    ReconstructedTimeline - Snapshots plus the filled price grid behind them
    AllocationSummary    - Category breakdown at one point in time
    PortfolioValuation   - Complete result of one valuation pass
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from asset_insights.models import AssetCategory, Holding
from asset_insights.services.constants import PERCENT, ZERO
from asset_insights.utils.date_utils import format_display_date


# =============================================================================
# HOLDING VALUATION
# =============================================================================

@dataclass(frozen=True)
class ValuedHolding:
    """
    A holding valued in the display currency.

    Attributes:
        holding: The source holding (unchanged)
        display_currency: Currency all *_in_display fields are expressed in
        native_price: Unit price in native_currency (1 for face-value holdings)
        native_currency: Currency of native_price
        price_in_display: Display-currency value of one unit
        value_in_display: Display-currency value of the whole holding
        day_change_in_display: Value change between the last two timeline points
        day_change_percent: Native price change between those points, in percent
        warnings: Data quality notes (missing quote, missing rate)

    Note:
        Day change is always 0 for face-value holdings and whenever fewer
        than two filled timeline points are available for the holding.
    """

    holding: Holding
    display_currency: str
    native_price: Decimal
    native_currency: str
    price_in_display: Decimal
    value_in_display: Decimal
    day_change_in_display: Decimal = ZERO
    day_change_percent: Decimal = ZERO
    warnings: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.holding.id

    @property
    def category(self) -> AssetCategory:
        return self.holding.category


# =============================================================================
# TIMELINE
# =============================================================================

@dataclass(frozen=True)
class FilledPoint:
    """
    Native prices known at one timeline point after forward-filling.

    Attributes:
        timestamp: Epoch seconds of the source sparse point
        prices: Holding id -> last observed native price. Holdings that have
                not been sampled yet are absent (not zero).
    """

    timestamp: int
    prices: Mapping[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class Snapshot:
    """
    One reconstructed point in the portfolio value timeline.

    Attributes:
        timestamp: Epoch seconds (same as the source sparse point)
        total_value: Sum of holding_values, in the display currency
        category_values: Per-category sum of holding_values
        holding_values: Holding id -> contribution. Market-priced holdings
                        without any sample so far are absent; holdings not
                        yet acquired are present with value 0.
    """

    timestamp: int
    total_value: Decimal
    category_values: Mapping[AssetCategory, Decimal] = field(default_factory=dict)
    holding_values: Mapping[str, Decimal] = field(default_factory=dict)

    @property
    def display_date(self) -> str:
        return format_display_date(self.timestamp)


@dataclass(frozen=True)
class ReconstructedTimeline:
    """
    Output of TimelineReconstructor.

    snapshots and filled_points are parallel: both have one entry per input
    sparse point, in input order.
    """

    snapshots: tuple[Snapshot, ...] = ()
    filled_points: tuple[FilledPoint, ...] = ()

    @property
    def tail_pair(self) -> tuple[FilledPoint, FilledPoint] | None:
        """The last two filled points (previous, last), or None if fewer exist."""
        if len(self.filled_points) < 2:
            return None
        return self.filled_points[-2], self.filled_points[-1]


# =============================================================================
# ALLOCATION
# =============================================================================

@dataclass(frozen=True)
class AllocationSummary:
    """
    Category breakdown at one point in time.

    Attributes:
        category_values: Category -> value, only categories with value > 0,
                         in AssetCategory declaration order
        total_value: Sum of all values
    """

    category_values: Mapping[AssetCategory, Decimal] = field(default_factory=dict)
    total_value: Decimal = ZERO

    @property
    def percentages(self) -> dict[AssetCategory, Decimal]:
        """Share of each category in total_value, in percent (0 if total is 0)."""
        if self.total_value == ZERO:
            return {category: ZERO for category in self.category_values}
        return {
            category: value / self.total_value * PERCENT
            for category, value in self.category_values.items()
        }


# =============================================================================
# PORTFOLIO VALUATION
# =============================================================================

@dataclass(frozen=True)
class PortfolioValuation:
    """
    Complete result of one valuation pass.

    Attributes:
        display_currency: Currency of every value in this result
        holdings: One ValuedHolding per input holding, in input order
        allocation: Current category breakdown
        snapshots: Dense historical timeline (empty if no timeline supplied)
        warnings: De-duplicated data quality warnings across the pass
    """

    display_currency: str
    holdings: tuple[ValuedHolding, ...]
    allocation: AllocationSummary
    snapshots: tuple[Snapshot, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def total_value(self) -> Decimal:
        return self.allocation.total_value

    @property
    def total_day_change(self) -> Decimal:
        return sum((h.day_change_in_display for h in self.holdings), ZERO)

    @property
    def total_day_change_percent(self) -> Decimal:
        """
        Day change relative to the previous total.

        Previous total = current total - day change. Returns 0 when the
        previous total is 0.
        """
        previous_total = self.total_value - self.total_day_change
        if previous_total == ZERO:
            return ZERO
        return self.total_day_change / previous_total * PERCENT
