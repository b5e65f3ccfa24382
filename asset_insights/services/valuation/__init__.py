# asset_insights/services/valuation/__init__.py
"""
Valuation Service Package.

This package provides portfolio valuation capabilities:
- Current valuation with day change (get_valuation)
- Dense value timeline for charts (get_history)
- Manual snapshots (take_snapshot, merge_snapshot)

Architecture:
    valuation/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Derived data classes
    ├── calculators.py           # Point-in-time valuator and aggregator
    ├── history_calculator.py    # Timeline reconstruction (forward-fill)
    └── service.py               # ValuationService (orchestrator)

Data Flow:
    Sparse timeline → TimelineReconstructor → FilledPoints + Snapshots
    Holding + Quotes + Rates + tail FilledPoints → AssetValuator → ValuedHolding
    ValuedHoldings / Snapshot → AllocationAggregator → AllocationSummary
    All Above → PortfolioValuation
"""

from asset_insights.services.valuation.calculators import (
    AllocationAggregator,
    AssetValuator,
    holding_value,
)
from asset_insights.services.valuation.history_calculator import TimelineReconstructor
from asset_insights.services.valuation.service import ValuationService
from asset_insights.services.valuation.types import (
    AllocationSummary,
    FilledPoint,
    PortfolioValuation,
    ReconstructedTimeline,
    Snapshot,
    ValuedHolding,
)

__all__ = [
    # Main service
    "ValuationService",

    # Data types
    "ValuedHolding",
    "FilledPoint",
    "Snapshot",
    "ReconstructedTimeline",
    "AllocationSummary",
    "PortfolioValuation",

    # Calculators
    "AssetValuator",
    "AllocationAggregator",
    "TimelineReconstructor",
    "holding_value",
]
