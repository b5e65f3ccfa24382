# asset_insights/models.py
"""
Domain models for portfolio holdings and the market data they are valued against.

These are the INPUTS of a valuation pass. They are supplied by external
collaborators (the persistence/UI layer for holdings, market data fetchers
for quotes, rates and timeline samples) and are treated as immutable for the
duration of a pass.

Derived results (valuations, snapshots, allocations) live in
asset_insights/services/valuation/types.py.
"""

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Mapping

from asset_insights.utils.fx_conversion import to_decimal


class AssetCategory(str, enum.Enum):
    """
    Canonical holding categories.

    EQUITY and CRYPTO are market-priced: their value is amount × unit price.
    BANK and SAVINGS are face-value: the amount is already a quantity of money.
    """

    EQUITY = "EQUITY"
    CRYPTO = "CRYPTO"
    BANK = "BANK"
    SAVINGS = "SAVINGS"

    @property
    def is_market_priced(self) -> bool:
        return self in MARKET_PRICED_CATEGORIES

    @classmethod
    def from_label(cls, label: "str | AssetCategory") -> "AssetCategory":
        """
        Resolve a canonical category from a user-facing label.

        Accepts the canonical names plus the instrument labels used by the
        asset form ("Stock", "ETF", "Fixed Deposit", ...). Matching is
        case-insensitive and ignores surrounding whitespace.

        Raises:
            ValueError: If the label does not map to a canonical category
        """
        if isinstance(label, cls):
            return label
        if not isinstance(label, str):
            raise ValueError(f"Invalid category: {label!r}")

        key = label.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            pass

        category = CATEGORY_ALIASES.get(key)
        if category is None:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Invalid category: '{label}'. Valid categories: {valid}")
        return category


MARKET_PRICED_CATEGORIES = frozenset({AssetCategory.EQUITY, AssetCategory.CRYPTO})

# Instrument labels that collapse onto a canonical category
CATEGORY_ALIASES: dict[str, AssetCategory] = {
    "EQUITY_LIKE": AssetCategory.EQUITY,
    "STOCK": AssetCategory.EQUITY,
    "ETF": AssetCategory.EQUITY,
    "FUND": AssetCategory.EQUITY,
    "INDEX": AssetCategory.EQUITY,
    "OPTION": AssetCategory.EQUITY,
    "COIN": AssetCategory.CRYPTO,
    "CASH": AssetCategory.BANK,
    "FIXED_DEPOSIT": AssetCategory.SAVINGS,
    "DEPOSIT": AssetCategory.SAVINGS,
}


@dataclass(frozen=True)
class Holding:
    """
    A single position in the user's portfolio.

    Attributes:
        id: Unique identifier, stable across re-renders
        category: Canonical category (drives market-priced vs face-value rules)
        amount: Units held (market-priced) or money held (face-value), >= 0
        currency: Native settlement currency (used by face-value holdings)
        acquisition_date: Holding contributes nothing to timeline points before this date
        name: Display name (optional)
        symbol: Ticker or coin symbol used to look up quotes (optional)
    """

    id: str
    category: AssetCategory
    amount: Decimal
    currency: str
    acquisition_date: date
    name: str | None = None
    symbol: str | None = None

    def __post_init__(self) -> None:
        # ints and floats from callers are stored as Decimal
        object.__setattr__(self, "amount", to_decimal(self.amount))

    @property
    def is_market_priced(self) -> bool:
        return self.category.is_market_priced

    @property
    def label(self) -> str:
        """Human-readable identifier for warnings and logs."""
        return self.symbol or self.name or self.id


@dataclass(frozen=True)
class MarketQuote:
    """Most recent known native price of a holding and its denomination."""

    price: Decimal
    currency: str


@dataclass(frozen=True)
class TimelinePoint:
    """
    One sparse observation point as returned by the history provider.

    Attributes:
        timestamp: Epoch seconds of the sample
        assets: Native price per holding id, only for holdings sampled here
    """

    timestamp: int
    assets: Mapping[str, Decimal] = field(default_factory=dict)


# Type aliases for the collaborator data contract
RateTable = Mapping[str, Decimal]
QuoteMap = Mapping[str, MarketQuote]
