# tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Environment setup (runs before any application import)
- Rate tables
- Holding factories for each category
"""

import os

# Set environment BEFORE importing app modules so Settings picks it up
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from asset_insights.models import AssetCategory, Holding


# =============================================================================
# RATE TABLES
# =============================================================================

@pytest.fixture
def rates() -> dict[str, Decimal]:
    """USD-anchored rate table with round numbers."""
    return {
        "USD": Decimal("1"),
        "TWD": Decimal("32"),
        "CNY": Decimal("7.2"),
        "SGD": Decimal("1.35"),
    }


# =============================================================================
# HOLDING FACTORIES
# =============================================================================

@pytest.fixture
def make_holding() -> Callable[..., Holding]:
    """
    Factory for holdings with sensible defaults.

    Usage:
        make_holding("a", AssetCategory.EQUITY, "10", symbol="NVDA")
    """

    def _make(
            holding_id: str,
            category: AssetCategory = AssetCategory.EQUITY,
            amount: str | Decimal = "10",
            currency: str = "USD",
            acquisition_date: date = date(2020, 1, 1),
            name: str | None = None,
            symbol: str | None = None,
    ) -> Holding:
        return Holding(
            id=holding_id,
            category=category,
            amount=Decimal(amount),
            currency=currency,
            acquisition_date=acquisition_date,
            name=name,
            symbol=symbol,
        )

    return _make


@pytest.fixture
def equity_holding(make_holding) -> Holding:
    """10 shares quoted in USD."""
    return make_holding("a", AssetCategory.EQUITY, "10", symbol="NVDA")


@pytest.fixture
def crypto_holding(make_holding) -> Holding:
    """Half a bitcoin."""
    return make_holding("b", AssetCategory.CRYPTO, "0.5", symbol="BTC")


@pytest.fixture
def bank_holding(make_holding) -> Holding:
    """TWD cash account."""
    return make_holding("c", AssetCategory.BANK, "100000", currency="TWD", name="Checking")


@pytest.fixture
def savings_holding(make_holding) -> Holding:
    """USD fixed deposit."""
    return make_holding("d", AssetCategory.SAVINGS, "1000", currency="USD", name="Time deposit")


@pytest.fixture
def portfolio(equity_holding, crypto_holding, bank_holding, savings_holding) -> list[Holding]:
    """One holding per category."""
    return [equity_holding, crypto_holding, bank_holding, savings_holding]

