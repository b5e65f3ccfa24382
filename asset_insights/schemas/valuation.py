# asset_insights/schemas/valuation.py
"""
Pydantic schemas for Portfolio Valuation.

These schemas handle:
- Valuation requests (holdings + market data supplied by the caller)
- Current valuation with per-holding breakdown and allocation
- Reconstructed value history (time series)
- Manual snapshots merged into a saved history

Request schemas convert themselves into engine domain objects via the
to_domain() / domain_*() helpers so routers stay thin.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from asset_insights.models import (
    AssetCategory,
    Holding,
    MarketQuote,
    TimelinePoint,
)
from asset_insights.services.constants import DEFAULT_ANCHOR_CURRENCY
from asset_insights.services.valuation.types import Snapshot
from asset_insights.schemas.validators import (
    validate_category,
    validate_currency,
    validate_optional_currency,
    validate_rate_table,
    validate_symbol,
)


# =============================================================================
# INPUT SCHEMAS
# =============================================================================

class HoldingIn(BaseModel):
    """A portfolio holding as submitted by the client."""

    id: str = Field(..., min_length=1, max_length=64, description="Unique holding id")
    category: AssetCategory = Field(
        ...,
        description="EQUITY, CRYPTO, BANK, SAVINGS or an alias (Stock, ETF, Fixed Deposit, ...)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Units held (EQUITY/CRYPTO) or money held (BANK/SAVINGS)"
    )
    currency: str = Field(..., description="Native currency (ISO 4217)")
    acquisition_date: dt.date = Field(
        ...,
        description="Holding contributes 0 to history points before this date"
    )
    name: str | None = Field(default=None, max_length=200)
    symbol: str | None = Field(default=None, description="Ticker or coin symbol")

    @field_validator("id")
    @classmethod
    def normalize_id(cls, v: str) -> str:
        """Trim whitespace; a blank id is rejected."""
        v = v.strip()
        if not v:
            raise ValueError("Holding id cannot be blank")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category(cls, v: str | AssetCategory) -> AssetCategory:
        return validate_category(v)

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        return validate_currency(v)

    @field_validator("symbol")
    @classmethod
    def check_symbol(cls, v: str | None) -> str | None:
        return validate_symbol(v)

    def to_domain(self) -> Holding:
        return Holding(
            id=self.id,
            category=self.category,
            amount=self.amount,
            currency=self.currency,
            acquisition_date=self.acquisition_date,
            name=self.name,
            symbol=self.symbol,
        )


class MarketQuoteIn(BaseModel):
    """Latest known price of a market-priced holding."""

    price: Decimal = Field(..., ge=0, description="Unit price in `currency`")
    currency: str = Field(
        default=DEFAULT_ANCHOR_CURRENCY,
        description="Currency the price is quoted in"
    )

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        return validate_currency(v)


class TimelinePointIn(BaseModel):
    """One sparse history sample: native prices for the holdings sampled here."""

    timestamp: int = Field(..., ge=0, description="Epoch seconds (UTC)")
    assets: dict[str, Decimal | None] = Field(
        default_factory=dict,
        description="Holding id -> native price (null = not sampled)"
    )

    @field_validator("assets")
    @classmethod
    def check_prices(cls, v: dict[str, Decimal | None]) -> dict[str, Decimal | None]:
        for holding_id, price in v.items():
            if price is not None and price < 0:
                raise ValueError(f"Price for {holding_id} must be >= 0, got {price}")
        return v


class ValuationRequest(BaseModel):
    """
    Everything one valuation pass needs.

    `rates` may be omitted, in which case the configured fallback rate table
    is used.
    """

    holdings: list[HoldingIn] = Field(default_factory=list)
    rates: dict[str, Decimal] | None = Field(
        default=None,
        description="Currency -> rate against the anchor currency (1 anchor = rate × currency)"
    )
    market_quotes: dict[str, MarketQuoteIn] = Field(
        default_factory=dict,
        description="Holding id -> latest quote"
    )
    timeline: list[TimelinePointIn] = Field(
        default_factory=list,
        description="Sparse history samples, ascending by timestamp"
    )
    display_currency: str | None = Field(
        default=None,
        description="Currency for all returned values (defaults to the configured one)"
    )

    @field_validator("rates")
    @classmethod
    def check_rates(cls, v: dict[str, Decimal] | None) -> dict[str, Decimal] | None:
        return validate_rate_table(v)

    @field_validator("display_currency")
    @classmethod
    def check_display_currency(cls, v: str | None) -> str | None:
        return validate_optional_currency(v)

    def domain_holdings(self) -> list[Holding]:
        return [h.to_domain() for h in self.holdings]

    def domain_quotes(self) -> dict[str, MarketQuote]:
        return {
            holding_id: MarketQuote(price=quote.price, currency=quote.currency)
            for holding_id, quote in self.market_quotes.items()
        }

    def domain_timeline(self) -> list[TimelinePoint]:
        return [
            TimelinePoint(
                timestamp=point.timestamp,
                assets={k: v for k, v in point.assets.items() if v is not None},
            )
            for point in self.timeline
        ]


class SnapshotIn(BaseModel):
    """A previously saved snapshot, sent back by the client for merging."""

    timestamp: int = Field(..., ge=0)
    total_value: Decimal
    category_values: dict[AssetCategory, Decimal] = Field(default_factory=dict)
    holding_values: dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("category_values", mode="before")
    @classmethod
    def resolve_categories(cls, v: dict) -> dict:
        if not isinstance(v, dict):
            return v
        return {validate_category(key): value for key, value in v.items()}

    def to_domain(self) -> Snapshot:
        return Snapshot(
            timestamp=self.timestamp,
            total_value=self.total_value,
            category_values=dict(self.category_values),
            holding_values=dict(self.holding_values),
        )


class SnapshotRequest(ValuationRequest):
    """Valuation inputs plus the saved history the new snapshot joins."""

    history: list[SnapshotIn] = Field(default_factory=list)
    timestamp: int | None = Field(
        default=None,
        ge=0,
        description="Snapshot time in epoch seconds (defaults to now)"
    )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ValuedHoldingResponse(BaseModel):
    """One holding valued in the display currency."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    symbol: str | None = None
    category: AssetCategory
    amount: Decimal = Field(..., description="Units or money held")
    currency: str = Field(..., description="Holding's native currency")
    native_price: Decimal = Field(..., description="Unit price in native_currency")
    native_currency: str
    price_in_display: Decimal = Field(..., description="Unit price in display currency")
    value_in_display: Decimal = Field(..., description="Holding value in display currency")
    day_change: Decimal = Field(..., description="Change between the last two history points")
    day_change_percent: Decimal
    warnings: list[str] = Field(default_factory=list)


class AllocationEntry(BaseModel):
    """One slice of the allocation chart."""

    category: AssetCategory
    value: Decimal
    percentage: Decimal = Field(..., description="Share of total value, 0-100")


class SnapshotResponse(BaseModel):
    """One point of the value history."""

    timestamp: int
    date: str = Field(..., description="UTC calendar date label (YYYY-MM-DD)")
    total_value: Decimal
    category_values: dict[AssetCategory, Decimal]
    holding_values: dict[str, Decimal]


class PortfolioValuationResponse(BaseModel):
    """Complete portfolio valuation response."""

    display_currency: str
    total_value: Decimal
    total_day_change: Decimal
    total_day_change_percent: Decimal
    holdings: list[ValuedHoldingResponse]
    allocation: list[AllocationEntry] = Field(
        ...,
        description="Categories with a positive value only"
    )
    history: list[SnapshotResponse] = Field(
        default_factory=list,
        description="Reconstructed value history (one point per timeline sample)"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Data quality warnings (missing quotes, rates, history)"
    )


class ValuationHistoryResponse(BaseModel):
    """Portfolio value history (time series)."""

    display_currency: str
    data: list[SnapshotResponse]
    total_points: int


class SnapshotMergeResponse(BaseModel):
    """The captured snapshot and the history it was merged into."""

    display_currency: str
    snapshot: SnapshotResponse
    history: list[SnapshotResponse]
    total_points: int
