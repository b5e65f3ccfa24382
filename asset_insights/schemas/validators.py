# asset_insights/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

This module provides:
- Currency code validation and normalization
- Holding category resolution (canonical names and aliases)
- Ticker / coin symbol validation
- Rate table validation

Schemas call these from field validators and let the raised ValueError
surface as a 422 response.
"""

import re
from decimal import Decimal

from asset_insights.models import AssetCategory

# =============================================================================
# CONSTANTS
# =============================================================================

# Currency: ISO 4217 format (3 uppercase letters)
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

# Symbol: tickers (NVDA, BRK.B, ^TWII), Taiwan codes (2330), coins (BTC)
SYMBOL_PATTERN = re.compile(r'^[\^]?[A-Z0-9][A-Z0-9.\-]{0,19}$')
SYMBOL_MAX_LENGTH = 20


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code.

    Args:
        value: Raw currency input (e.g., "twd", " USD ")

    Returns:
        Normalized currency (uppercase, trimmed)

    Raises:
        ValueError: If currency format is invalid
    """
    if not value:
        raise ValueError("Currency cannot be empty")

    normalized = value.strip().upper()

    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid currency format: '{normalized}'. "
            "Currency must be a 3-letter ISO code (e.g., USD, TWD)"
        )

    return normalized


def validate_optional_currency(value: str | None) -> str | None:
    """validate_currency() that passes None through."""
    if value is None:
        return None
    return validate_currency(value)


# =============================================================================
# CATEGORY VALIDATION
# =============================================================================

def validate_category(value: str | AssetCategory) -> AssetCategory:
    """
    Resolve a holding category.

    Accepts canonical names (EQUITY, CRYPTO, BANK, SAVINGS) and instrument
    aliases (Stock, ETF, Fixed Deposit, ...), case-insensitively.

    Raises:
        ValueError: If the label maps to no category
    """
    return AssetCategory.from_label(value)


# =============================================================================
# SYMBOL VALIDATION
# =============================================================================

def validate_symbol(value: str | None) -> str | None:
    """
    Validate and normalize a ticker or coin symbol.

    Blank input is treated as "no symbol" (None).

    Raises:
        ValueError: If symbol format is invalid
    """
    if value is None:
        return None

    normalized = value.strip().upper()
    if not normalized:
        return None

    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise ValueError(f"Symbol cannot exceed {SYMBOL_MAX_LENGTH} characters")

    if not SYMBOL_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid symbol format: '{normalized}'. "
            "Symbol must be alphanumeric, may include dots (.) or dashes (-)"
        )

    return normalized


# =============================================================================
# RATE TABLE VALIDATION
# =============================================================================

def validate_rate_table(value: dict[str, Decimal] | None) -> dict[str, Decimal] | None:
    """
    Normalize currency keys and require strictly positive rates.

    Raises:
        ValueError: On a malformed currency code or a rate <= 0
    """
    if value is None:
        return None

    table: dict[str, Decimal] = {}
    for code, rate in value.items():
        normalized = validate_currency(code)
        if rate <= 0:
            raise ValueError(f"Rate for {normalized} must be positive, got {rate}")
        table[normalized] = rate
    return table
