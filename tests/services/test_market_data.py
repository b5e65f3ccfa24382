# tests/services/test_market_data.py
"""
Tests for market data normalization adapters.
"""

from decimal import Decimal

import pytest

from asset_insights.models import AssetCategory, MarketQuote, TimelinePoint
from asset_insights.services.market_data import (
    build_market_quotes,
    format_provider_symbol,
    merge_price_series,
    resolve_rate_table,
)


# =============================================================================
# PROVIDER SYMBOLS
# =============================================================================

class TestFormatProviderSymbol:

    @pytest.mark.parametrize(
        "symbol,category,expected",
        [
            ("btc", AssetCategory.CRYPTO, "BTC-USD"),
            ("2330", AssetCategory.EQUITY, "2330.TW"),
            ("0050", AssetCategory.EQUITY, "0050.TW"),
            ("nvda", AssetCategory.EQUITY, "NVDA"),
            (" brk.b ", AssetCategory.EQUITY, "BRK.B"),
        ],
    )
    def test_formats(self, symbol, category, expected):
        assert format_provider_symbol(symbol, category) == expected


# =============================================================================
# MARKET QUOTES
# =============================================================================

class TestBuildMarketQuotes:

    def test_maps_symbols_to_holding_ids(self, equity_holding, crypto_holding):
        quotes = build_market_quotes(
            [equity_holding, crypto_holding],
            stock_prices={"NVDA": 120.5},
            crypto_prices={"BTC": Decimal("60000")},
        )

        assert quotes == {
            "a": MarketQuote(price=Decimal("120.5"), currency="USD"),
            "b": MarketQuote(price=Decimal("60000"), currency="USD"),
        }

    def test_lookup_is_case_insensitive(self, make_holding):
        holding = make_holding("x", AssetCategory.EQUITY, symbol="aapl")

        quotes = build_market_quotes([holding], {"aapl": 190}, {})

        assert quotes["x"].price == Decimal("190")

    def test_crypto_does_not_read_stock_table(self, crypto_holding):
        quotes = build_market_quotes([crypto_holding], {"BTC": 1}, {})

        assert quotes == {}

    def test_skips_face_value_and_symbolless(self, bank_holding, make_holding):
        no_symbol = make_holding("n", AssetCategory.EQUITY)

        quotes = build_market_quotes([bank_holding, no_symbol], {"N": 1}, {})

        assert quotes == {}

    def test_custom_quote_currency(self, equity_holding):
        quotes = build_market_quotes([equity_holding], {"NVDA": 3900}, {}, quote_currency="TWD")

        assert quotes["a"].currency == "TWD"


# =============================================================================
# PRICE SERIES
# =============================================================================

class TestMergePriceSeries:

    def test_merges_and_sorts(self):
        timeline = merge_price_series({
            "a": [(200, 5), (100, 4)],
            "b": [(100, Decimal("60000"))],
        })

        assert timeline == [
            TimelinePoint(timestamp=100, assets={"a": Decimal("4"), "b": Decimal("60000")}),
            TimelinePoint(timestamp=200, assets={"a": Decimal("5")}),
        ]

    def test_skips_none_prices(self):
        timeline = merge_price_series({"a": [(100, None), (200, 5.5)]})

        assert timeline == [TimelinePoint(timestamp=200, assets={"a": Decimal("5.5")})]

    def test_empty_input(self):
        assert merge_price_series({}) == []


# =============================================================================
# RATE TABLE
# =============================================================================

class TestResolveRateTable:

    @pytest.fixture
    def fallback(self):
        return {"USD": Decimal("1"), "TWD": Decimal("32.5")}

    def test_uses_supplied_rates(self, fallback):
        table = resolve_rate_table({"usd": 1, "twd": 31.8}, fallback)

        assert table == {"USD": Decimal("1"), "TWD": Decimal("31.8")}

    @pytest.mark.parametrize("rates", [None, {}])
    def test_falls_back_when_missing(self, fallback, rates):
        assert resolve_rate_table(rates, fallback) == fallback

    def test_forces_anchor_to_one(self, fallback):
        table = resolve_rate_table({"USD": Decimal("2"), "TWD": Decimal("64")}, fallback)

        assert table["USD"] == Decimal("1")

    def test_adds_missing_anchor(self, fallback):
        table = resolve_rate_table({"TWD": Decimal("32")}, fallback, anchor_currency="USD")

        assert table == {"TWD": Decimal("32"), "USD": Decimal("1")}

    def test_does_not_mutate_fallback(self, fallback):
        resolve_rate_table(None, fallback, anchor_currency="TWD")

        assert fallback["TWD"] == Decimal("32.5")
