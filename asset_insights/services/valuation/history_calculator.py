# asset_insights/services/valuation/history_calculator.py
"""
Timeline reconstruction for portfolio value history.

The history provider returns a SPARSE grid: each point only carries prices
for the holdings it happened to sample. This calculator turns it into a
DENSE series of Snapshots, one per input point, using the Rolling State
pattern:

1. Walk the points in order, carrying a "last known native price" per
   holding forward (forward-fill)
2. At each point, value every holding with the carried price
3. Zero out holdings that were not yet acquired at that point

Rules:
- A market-priced holding with no sample so far contributes NOTHING (it is
  absent from the snapshot, not zero). No backward-fill, no interpolation.
- Face-value holdings (bank, savings) are not sampled; they are valued at
  face value at every point.
- Acquisition gating suppresses the contribution but never the cache
  update, so later points still see the latest price.

The rolling state is a local dict of one call; nothing survives between
calls.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from asset_insights.models import AssetCategory, Holding, RateTable, TimelinePoint
from asset_insights.services.constants import DEFAULT_ANCHOR_CURRENCY, ONE, ZERO
from asset_insights.services.valuation.calculators import holding_value
from asset_insights.services.valuation.types import (
    FilledPoint,
    ReconstructedTimeline,
    Snapshot,
)
from asset_insights.utils.date_utils import date_to_timestamp
from asset_insights.utils.fx_conversion import to_decimal

logger = logging.getLogger(__name__)


class TimelineReconstructor:
    """
    Reconstructs a dense portfolio value timeline from sparse samples.

    Complexity: O(P × H) for P points and H holdings, single pass.
    """

    def __init__(self, anchor_currency: str = DEFAULT_ANCHOR_CURRENCY) -> None:
        """
        Args:
            anchor_currency: Currency assumed for holdings without a quote currency
        """
        self._anchor_currency = anchor_currency

    def reconstruct(
            self,
            timeline: Sequence[TimelinePoint],
            holdings: Sequence[Holding],
            quote_currencies: Mapping[str, str],
            rate_table: RateTable,
            display_currency: str,
    ) -> list[Snapshot]:
        """
        Build one Snapshot per sparse point.

        Args:
            timeline: Sparse points, ascending by timestamp
            holdings: Holdings to value at every point
            quote_currencies: Holding id -> currency its prices are quoted in
            rate_table: Currency code -> rate against the anchor
            display_currency: Currency of every snapshot value

        Returns:
            Snapshots in input order (empty list for an empty timeline)
        """
        return list(
            self.reconstruct_timeline(
                timeline, holdings, quote_currencies, rate_table, display_currency
            ).snapshots
        )

    def reconstruct_timeline(
            self,
            timeline: Sequence[TimelinePoint],
            holdings: Sequence[Holding],
            quote_currencies: Mapping[str, str],
            rate_table: RateTable,
            display_currency: str,
    ) -> ReconstructedTimeline:
        """
        Same as reconstruct(), also returning the filled price grid.

        The filled grid feeds AssetValuator's day-change calculation so both
        use the same forward-filled prices.
        """
        filled_points = self.forward_fill(timeline, holdings)

        snapshots = tuple(
            self._snapshot_point(
                point=point,
                holdings=holdings,
                quote_currencies=quote_currencies,
                rate_table=rate_table,
                display_currency=display_currency,
            )
            for point in filled_points
        )

        logger.debug(
            f"Reconstructed {len(snapshots)} snapshots for {len(holdings)} holdings"
        )
        return ReconstructedTimeline(snapshots=snapshots, filled_points=tuple(filled_points))

    def forward_fill(
            self,
            timeline: Iterable[TimelinePoint],
            holdings: Iterable[Holding],
    ) -> list[FilledPoint]:
        """
        Carry each market-priced holding's last observed price forward.

        Samples for unknown ids and for face-value holdings are ignored.

        Args:
            timeline: Sparse points, ascending by timestamp
            holdings: Holdings whose prices are tracked

        Returns:
            One FilledPoint per input point, in input order
        """
        tracked_ids = {h.id for h in holdings if h.is_market_priced}

        # Rolling state - mutated as we walk the timeline
        last_known: dict[str, Decimal] = {}
        filled: list[FilledPoint] = []
        previous_timestamp: int | None = None

        for point in timeline:
            if previous_timestamp is not None and point.timestamp < previous_timestamp:
                logger.warning(
                    f"Timeline point {point.timestamp} is earlier than "
                    f"{previous_timestamp}; input is not in ascending order"
                )
            previous_timestamp = point.timestamp

            for holding_id, price in point.assets.items():
                if holding_id in tracked_ids and price is not None:
                    last_known[holding_id] = to_decimal(price)

            filled.append(FilledPoint(timestamp=point.timestamp, prices=dict(last_known)))

        return filled

    def _snapshot_point(
            self,
            point: FilledPoint,
            holdings: Sequence[Holding],
            quote_currencies: Mapping[str, str],
            rate_table: RateTable,
            display_currency: str,
    ) -> Snapshot:
        """Value every holding at one filled point."""
        holding_values: dict[str, Decimal] = {}
        category_totals: dict[AssetCategory, Decimal] = {}
        total_value = ZERO

        for holding in holdings:
            if holding.is_market_priced:
                price = point.prices.get(holding.id)
                if price is None:
                    # Not sampled yet: no contribution at all
                    continue
                price_currency = quote_currencies.get(holding.id) or self._anchor_currency
            else:
                price = ONE
                price_currency = holding.currency

            if point.timestamp < date_to_timestamp(holding.acquisition_date):
                value = ZERO
            else:
                value = holding_value(
                    holding, price, price_currency, display_currency, rate_table
                )

            holding_values[holding.id] = value
            category_totals[holding.category] = (
                category_totals.get(holding.category, ZERO) + value
            )
            total_value += value

        category_values = {
            category: category_totals[category]
            for category in AssetCategory
            if category in category_totals
        }

        return Snapshot(
            timestamp=point.timestamp,
            total_value=total_value,
            category_values=category_values,
            holding_values=holding_values,
        )
