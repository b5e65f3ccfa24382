# tests/services/test_history_calculator.py
"""
Unit tests for TimelineReconstructor.

These tests verify the Rolling State forward-fill that turns a sparse
price timeline into one portfolio Snapshot per input point.

Key Properties Tested:
1. Last observed prices carry forward to later points
2. Holdings contribute nothing before their first sample
3. Holdings contribute 0 before their acquisition date
4. Face-value holdings are valued at every point
5. Snapshot totals equal the sum of their parts
"""

import logging
from datetime import date
from decimal import Decimal

import pytest

from asset_insights.models import AssetCategory, Holding, TimelinePoint
from asset_insights.services.valuation.history_calculator import TimelineReconstructor

DAY = 86400
T_JAN_1 = 1704067200  # 2024-01-01T00:00:00Z
T_JUNE_1 = 1717200000  # 2024-06-01T00:00:00Z


def point(timestamp: int, **prices: str) -> TimelinePoint:
    return TimelinePoint(
        timestamp=timestamp,
        assets={k: Decimal(v) for k, v in prices.items()},
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def reconstructor():
    return TimelineReconstructor(anchor_currency="USD")


@pytest.fixture
def usd_quotes():
    """Every market-priced test holding is quoted in USD."""
    return {"a": "USD", "b": "USD"}


# =============================================================================
# FORWARD FILL
# =============================================================================

class TestForwardFill:
    """Tests for the rolling price cache."""

    def test_price_carries_forward(self, reconstructor, equity_holding, usd_quotes, rates):
        """[{T1,{a:5}}, {T2,{}}] -> the T2 snapshot is valued from price 5."""
        timeline = [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY)]

        snapshots = reconstructor.reconstruct(
            timeline, [equity_holding], usd_quotes, rates, "USD"
        )

        assert len(snapshots) == 2
        assert snapshots[1].timestamp == T_JUNE_1 + DAY
        assert snapshots[1].holding_values["a"] == Decimal("50")
        assert snapshots[1].total_value == Decimal("50")

    def test_latest_sample_wins(self, reconstructor, equity_holding, usd_quotes, rates):
        timeline = [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY, a="6"), point(T_JUNE_1 + 2 * DAY)]

        snapshots = reconstructor.reconstruct(
            timeline, [equity_holding], usd_quotes, rates, "USD"
        )

        assert [s.holding_values["a"] for s in snapshots] == [
            Decimal("50"), Decimal("60"), Decimal("60"),
        ]

    def test_no_backward_fill(self, reconstructor, equity_holding, crypto_holding, usd_quotes, rates):
        """A holding first sampled at T2 is absent from the T1 snapshot."""
        timeline = [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY, a="5", b="60000")]

        snapshots = reconstructor.reconstruct(
            timeline, [equity_holding, crypto_holding], usd_quotes, rates, "USD"
        )

        assert "b" not in snapshots[0].holding_values
        assert snapshots[0].total_value == Decimal("50")
        assert snapshots[1].holding_values["b"] == Decimal("30000")

    def test_availability_is_monotonic(self, reconstructor, equity_holding, crypto_holding, usd_quotes, rates):
        """Once a holding has a price it stays in every later snapshot."""
        timeline = [
            point(T_JUNE_1),
            point(T_JUNE_1 + DAY, b="60000"),
            point(T_JUNE_1 + 2 * DAY, a="5"),
            point(T_JUNE_1 + 3 * DAY),
        ]

        snapshots = reconstructor.reconstruct(
            timeline, [equity_holding, crypto_holding], usd_quotes, rates, "USD"
        )

        present = [set(s.holding_values) for s in snapshots]
        for earlier, later in zip(present, present[1:]):
            assert earlier <= later
        assert present == [set(), {"b"}, {"a", "b"}, {"a", "b"}]

    def test_unknown_ids_are_ignored(self, reconstructor, equity_holding, usd_quotes, rates):
        timeline = [point(T_JUNE_1, a="5", ghost="100")]

        filled = reconstructor.forward_fill(timeline, [equity_holding])

        assert dict(filled[0].prices) == {"a": Decimal("5")}

    def test_face_value_samples_are_ignored(self, reconstructor, bank_holding):
        timeline = [point(T_JUNE_1, c="2")]

        filled = reconstructor.forward_fill(timeline, [bank_holding])

        assert dict(filled[0].prices) == {}

    def test_filled_points_are_independent(self, reconstructor, equity_holding):
        """Each FilledPoint owns a copy of the cache, not a shared reference."""
        timeline = [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY, a="6")]

        filled = reconstructor.forward_fill(timeline, [equity_holding])

        assert filled[0].prices["a"] == Decimal("5")
        assert filled[1].prices["a"] == Decimal("6")

    def test_out_of_order_input_logs_warning(self, reconstructor, equity_holding, caplog):
        timeline = [point(T_JUNE_1 + DAY, a="5"), point(T_JUNE_1, a="6")]

        with caplog.at_level(logging.WARNING):
            filled = reconstructor.forward_fill(timeline, [equity_holding])

        assert [p.timestamp for p in filled] == [T_JUNE_1 + DAY, T_JUNE_1]
        assert "not in ascending order" in caplog.text


# =============================================================================
# ACQUISITION GATING
# =============================================================================

class TestAcquisitionGating:
    """Holdings contribute 0 before they were acquired."""

    def test_point_before_acquisition_contributes_zero(self, reconstructor, make_holding, rates):
        """Acquired 2024-06-01, point at 2024-01-01 -> contribution 0."""
        holding = make_holding("a", AssetCategory.EQUITY, "10", acquisition_date=date(2024, 6, 1))

        snapshots = reconstructor.reconstruct(
            [point(T_JAN_1, a="5")], [holding], {"a": "USD"}, rates, "USD"
        )

        assert snapshots[0].holding_values == {"a": Decimal("0")}
        assert snapshots[0].total_value == Decimal("0")

    def test_acquisition_midnight_is_included(self, reconstructor, make_holding, rates):
        holding = make_holding("a", AssetCategory.EQUITY, "10", acquisition_date=date(2024, 6, 1))

        snapshots = reconstructor.reconstruct(
            [point(T_JUNE_1 - 1, a="5"), point(T_JUNE_1, a="5")],
            [holding], {"a": "USD"}, rates, "USD",
        )

        assert snapshots[0].holding_values["a"] == Decimal("0")
        assert snapshots[1].holding_values["a"] == Decimal("50")

    def test_gating_does_not_block_cache_update(self, reconstructor, make_holding, rates):
        """A price sampled before acquisition is still carried forward."""
        holding = make_holding("a", AssetCategory.EQUITY, "10", acquisition_date=date(2024, 6, 1))

        snapshots = reconstructor.reconstruct(
            [point(T_JAN_1, a="7"), point(T_JUNE_1)],
            [holding], {"a": "USD"}, rates, "USD",
        )

        assert snapshots[1].holding_values["a"] == Decimal("70")

    def test_face_value_gated_too(self, reconstructor, make_holding, rates):
        holding = make_holding(
            "c", AssetCategory.BANK, "500", currency="USD", acquisition_date=date(2024, 6, 1)
        )

        snapshots = reconstructor.reconstruct(
            [point(T_JAN_1), point(T_JUNE_1)], [holding], {}, rates, "USD"
        )

        assert [s.total_value for s in snapshots] == [Decimal("0"), Decimal("500")]

    def test_acquired_after_every_point_never_contributes(self, reconstructor, make_holding, rates):
        """A holding bought after the whole timeline is 0 at each point."""
        future_equity = make_holding("a", AssetCategory.EQUITY, "10", acquisition_date=date(2030, 1, 1))
        future_bank = make_holding(
            "c", AssetCategory.BANK, "500", currency="USD", acquisition_date=date(2030, 1, 1)
        )
        timeline = [point(T_JAN_1, a="5"), point(T_JUNE_1), point(T_JUNE_1 + DAY, a="6")]

        snapshots = reconstructor.reconstruct(
            timeline, [future_equity, future_bank], {"a": "USD"}, rates, "USD"
        )

        assert len(snapshots) == 3
        for snapshot in snapshots:
            assert snapshot.holding_values == {"a": Decimal("0"), "c": Decimal("0")}
            assert snapshot.total_value == Decimal("0")


# =============================================================================
# SNAPSHOT CONTENTS
# =============================================================================

class TestSnapshotContents:
    """Tests for snapshot values and invariants."""

    def test_face_value_present_at_every_point(self, reconstructor, bank_holding, rates):
        timeline = [point(T_JUNE_1), point(T_JUNE_1 + DAY)]

        snapshots = reconstructor.reconstruct(timeline, [bank_holding], {}, rates, "TWD")

        assert [s.holding_values["c"] for s in snapshots] == [Decimal("100000")] * 2

    def test_display_currency_conversion(self, reconstructor, equity_holding, bank_holding, rates):
        snapshots = reconstructor.reconstruct(
            [point(T_JUNE_1, a="5")], [equity_holding, bank_holding], {"a": "USD"}, rates, "TWD"
        )

        assert snapshots[0].holding_values == {"a": Decimal("1600"), "c": Decimal("100000")}
        assert snapshots[0].category_values == {
            AssetCategory.EQUITY: Decimal("1600"),
            AssetCategory.BANK: Decimal("100000"),
        }

    def test_missing_quote_currency_defaults_to_anchor(self, reconstructor, equity_holding, rates):
        snapshots = reconstructor.reconstruct(
            [point(T_JUNE_1, a="5")], [equity_holding], {}, rates, "TWD"
        )

        assert snapshots[0].holding_values["a"] == Decimal("1600")

    def test_sum_invariant_at_every_point(self, reconstructor, portfolio, usd_quotes, rates):
        timeline = [
            point(T_JUNE_1, a="5"),
            point(T_JUNE_1 + DAY, b="60000"),
            point(T_JUNE_1 + 2 * DAY, a="6", b="61000"),
        ]

        snapshots = reconstructor.reconstruct(timeline, portfolio, usd_quotes, rates, "TWD")

        for snapshot in snapshots:
            assert sum(snapshot.holding_values.values()) == snapshot.total_value
            assert sum(snapshot.category_values.values()) == snapshot.total_value

    def test_reconstructed_timeline_is_parallel(self, reconstructor, portfolio, usd_quotes, rates):
        timeline = [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY, a="6")]

        result = reconstructor.reconstruct_timeline(timeline, portfolio, usd_quotes, rates, "TWD")

        assert len(result.snapshots) == len(result.filled_points) == 2
        previous, last = result.tail_pair
        assert previous.prices["a"] == Decimal("5")
        assert last.prices["a"] == Decimal("6")

    def test_display_date_label(self, reconstructor, bank_holding, rates):
        snapshots = reconstructor.reconstruct([point(T_JUNE_1)], [bank_holding], {}, rates, "TWD")

        assert snapshots[0].display_date == "2024-06-01"


# =============================================================================
# EDGE CASES
# =============================================================================

class TestEdgeCases:

    def test_empty_timeline(self, reconstructor, portfolio, usd_quotes, rates):
        assert reconstructor.reconstruct([], portfolio, usd_quotes, rates, "TWD") == []

    def test_empty_timeline_has_no_tail_pair(self, reconstructor, portfolio, usd_quotes, rates):
        result = reconstructor.reconstruct_timeline([], portfolio, usd_quotes, rates, "TWD")

        assert result.tail_pair is None

    def test_zero_holdings(self, reconstructor, rates):
        """No holdings: one empty, zero-valued snapshot per point."""
        timeline = [point(T_JUNE_1 + i * DAY) for i in range(3)]

        snapshots = reconstructor.reconstruct(timeline, [], {}, rates, "TWD")

        assert len(snapshots) == 3
        for snapshot in snapshots:
            assert snapshot.total_value == Decimal("0")
            assert snapshot.holding_values == {}
            assert snapshot.category_values == {}

    def test_zero_amount_holding_is_still_forward_filled(self, reconstructor, make_holding, rates):
        holding = make_holding("b", AssetCategory.CRYPTO, "0")
        timeline = [point(T_JUNE_1, b="60000"), point(T_JUNE_1 + DAY), point(T_JUNE_1 + 2 * DAY)]

        result = reconstructor.reconstruct_timeline(timeline, [holding], {"b": "USD"}, rates, "TWD")

        assert [s.holding_values for s in result.snapshots] == [{"b": Decimal("0")}] * 3
        assert [s.total_value for s in result.snapshots] == [Decimal("0")] * 3
        assert [p.prices["b"] for p in result.filled_points] == [Decimal("60000")] * 3

    def test_float_amount(self, reconstructor, rates):
        holding = Holding(
            id="a",
            category=AssetCategory.EQUITY,
            amount=10.0,
            currency="USD",
            acquisition_date=date(2024, 1, 1),
        )

        snapshots = reconstructor.reconstruct(
            [point(T_JUNE_1, a="5"), point(T_JUNE_1 + DAY)], [holding], {"a": "USD"}, rates, "TWD"
        )

        assert [s.total_value for s in snapshots] == [Decimal("1600")] * 2

    def test_state_does_not_leak_between_calls(self, reconstructor, equity_holding, usd_quotes, rates):
        reconstructor.reconstruct([point(T_JUNE_1, a="5")], [equity_holding], usd_quotes, rates, "USD")

        snapshots = reconstructor.reconstruct(
            [point(T_JUNE_1 + DAY)], [equity_holding], usd_quotes, rates, "USD"
        )

        assert snapshots[0].holding_values == {}
