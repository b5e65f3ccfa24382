# asset_insights/routers/valuation.py
"""
Portfolio valuation endpoints.

The caller supplies holdings and whatever market data it has fetched
(quotes, rates, sparse history). Every endpoint is a pure computation over
the request body:
- POST /valuation          - Current valuation, allocation and history
- POST /valuation/history  - Reconstructed value history only
- POST /valuation/snapshot - Freeze current totals into a saved history

Omitted rates fall back to the configured FALLBACK_RATES table.
"""

from datetime import datetime, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends

from asset_insights.config import settings
from asset_insights.dependencies import get_fallback_rates, get_valuation_service
from asset_insights.schemas.valuation import (
    AllocationEntry,
    PortfolioValuationResponse,
    SnapshotMergeResponse,
    SnapshotRequest,
    SnapshotResponse,
    ValuationHistoryResponse,
    ValuationRequest,
    ValuedHoldingResponse,
)
from asset_insights.services.market_data import resolve_rate_table
from asset_insights.services.valuation import ValuationService
from asset_insights.services.valuation.types import (
    AllocationSummary,
    PortfolioValuation,
    Snapshot,
    ValuedHolding,
)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/valuation",
    tags=["Valuation"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_holding(valued: ValuedHolding) -> ValuedHoldingResponse:
    holding = valued.holding
    return ValuedHoldingResponse(
        id=holding.id,
        name=holding.name,
        symbol=holding.symbol,
        category=holding.category,
        amount=holding.amount,
        currency=holding.currency,
        native_price=valued.native_price,
        native_currency=valued.native_currency,
        price_in_display=valued.price_in_display,
        value_in_display=valued.value_in_display,
        day_change=valued.day_change_in_display,
        day_change_percent=valued.day_change_percent,
        warnings=list(valued.warnings),
    )


def _map_allocation(summary: AllocationSummary) -> list[AllocationEntry]:
    percentages = summary.percentages
    return [
        AllocationEntry(category=category, value=value, percentage=percentages[category])
        for category, value in summary.category_values.items()
    ]


def _map_snapshot(snapshot: Snapshot) -> SnapshotResponse:
    return SnapshotResponse(
        timestamp=snapshot.timestamp,
        date=snapshot.display_date,
        total_value=snapshot.total_value,
        category_values=dict(snapshot.category_values),
        holding_values=dict(snapshot.holding_values),
    )


def _map_valuation(valuation: PortfolioValuation) -> PortfolioValuationResponse:
    return PortfolioValuationResponse(
        display_currency=valuation.display_currency,
        total_value=valuation.total_value,
        total_day_change=valuation.total_day_change,
        total_day_change_percent=valuation.total_day_change_percent,
        holdings=[_map_holding(v) for v in valuation.holdings],
        allocation=_map_allocation(valuation.allocation),
        history=[_map_snapshot(s) for s in valuation.snapshots],
        warnings=list(valuation.warnings),
    )


def _rate_table(request: ValuationRequest, fallback: dict[str, Decimal]) -> dict[str, Decimal]:
    return resolve_rate_table(request.rates, fallback, settings.anchor_currency)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=PortfolioValuationResponse,
    summary="Value a portfolio",
    response_description="Current valuation with holdings, allocation and history",
)
def get_portfolio_valuation(
        request: ValuationRequest,
        fallback_rates: dict[str, Decimal] = Depends(get_fallback_rates),
        service: ValuationService = Depends(get_valuation_service),
) -> PortfolioValuationResponse:
    """
    Value every holding in the display currency.

    Returns:
    - **holdings**: Per-holding price, value and day change
    - **allocation**: Category breakdown (positive categories only)
    - **history**: One reconstructed point per timeline sample
    - **warnings**: Missing quotes / rates / history

    Missing market data never fails the request: the affected values are 0
    and a warning explains why.

    Raises **400** for duplicate holding ids or an unsupported display currency.
    """
    # Domain exceptions propagate to global handlers
    valuation = service.get_valuation(
        holdings=request.domain_holdings(),
        rate_table=_rate_table(request, fallback_rates),
        market_quotes=request.domain_quotes(),
        timeline=request.domain_timeline(),
        display_currency=request.display_currency,
    )
    return _map_valuation(valuation)


@router.post(
    "/history",
    response_model=ValuationHistoryResponse,
    summary="Reconstruct portfolio value history",
    response_description="Dense value timeline for charts",
)
def get_valuation_history(
        request: ValuationRequest,
        fallback_rates: dict[str, Decimal] = Depends(get_fallback_rates),
        service: ValuationService = Depends(get_valuation_service),
) -> ValuationHistoryResponse:
    """
    Forward-fill the sparse timeline into one value point per sample.

    Holdings contribute 0 before their acquisition date; market-priced
    holdings contribute nothing until their first sample.
    """
    display_currency = service.validate_display_currency(request.display_currency)
    snapshots = service.get_history(
        holdings=request.domain_holdings(),
        rate_table=_rate_table(request, fallback_rates),
        market_quotes=request.domain_quotes(),
        timeline=request.domain_timeline(),
        display_currency=display_currency,
    )
    return ValuationHistoryResponse(
        display_currency=display_currency,
        data=[_map_snapshot(s) for s in snapshots],
        total_points=len(snapshots),
    )


@router.post(
    "/snapshot",
    response_model=SnapshotMergeResponse,
    summary="Save a snapshot of current totals",
    response_description="The new snapshot and the merged history",
)
def save_valuation_snapshot(
        request: SnapshotRequest,
        fallback_rates: dict[str, Decimal] = Depends(get_fallback_rates),
        service: ValuationService = Depends(get_valuation_service),
) -> SnapshotMergeResponse:
    """
    Value the portfolio now and insert the totals into the supplied history.

    The history is returned sorted by timestamp. `timestamp` defaults to the
    current time.
    """
    valuation = service.get_valuation(
        holdings=request.domain_holdings(),
        rate_table=_rate_table(request, fallback_rates),
        market_quotes=request.domain_quotes(),
        display_currency=request.display_currency,
    )

    timestamp = request.timestamp
    if timestamp is None:
        timestamp = int(datetime.now(timezone.utc).timestamp())

    snapshot = service.take_snapshot(valuation, timestamp)
    history = service.merge_snapshot(
        (s.to_domain() for s in request.history),
        snapshot,
    )

    return SnapshotMergeResponse(
        display_currency=valuation.display_currency,
        snapshot=_map_snapshot(snapshot),
        history=[_map_snapshot(s) for s in history],
        total_points=len(history),
    )
