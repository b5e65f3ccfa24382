# asset_insights/services/constants.py
"""
Centralized constants for the valuation engine.

The engine itself never reads settings; these are its defaults. The service
layer overrides them from asset_insights.config where the deployment differs.

Usage:
    from asset_insights.services.constants import (
        DEFAULT_ANCHOR_CURRENCY,
        FALLBACK_RATES,
    )
"""

from decimal import Decimal


# =============================================================================
# NUMERIC CONSTANTS
# =============================================================================

ZERO: Decimal = Decimal("0")
ONE: Decimal = Decimal("1")
PERCENT: Decimal = Decimal("100")


# =============================================================================
# CURRENCY DEFAULTS
# =============================================================================

# Reference currency of every rate table (its own rate is always 1).
# Market quotes without an explicit currency are assumed to be in it.
DEFAULT_ANCHOR_CURRENCY: str = "USD"

# Currency the dashboard shows totals in unless the user picks another
DEFAULT_DISPLAY_CURRENCY: str = "TWD"

SUPPORTED_CURRENCIES: tuple[str, ...] = ("TWD", "USD", "CNY", "SGD")

# Rates used when the exchange-rate feed is unavailable (1 USD = X)
FALLBACK_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "TWD": Decimal("32.5"),
    "CNY": Decimal("7.2"),
    "SGD": Decimal("1.35"),
}
