# asset_insights/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

- errors: Error response formats
- validators: Reusable validation functions (currency, category, symbol, rates)
- valuation: Valuation requests, responses, history and snapshots

Usage:
    from asset_insights.schemas import ValuationRequest, PortfolioValuationResponse
    from asset_insights.schemas import ErrorDetail
"""

from asset_insights.schemas.errors import (
    ErrorDetail,
    ValidationErrorDetail,
)
from asset_insights.schemas.valuation import (
    AllocationEntry,
    HoldingIn,
    MarketQuoteIn,
    PortfolioValuationResponse,
    SnapshotIn,
    SnapshotMergeResponse,
    SnapshotRequest,
    SnapshotResponse,
    TimelinePointIn,
    ValuationHistoryResponse,
    ValuationRequest,
    ValuedHoldingResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Valuation requests
    "HoldingIn",
    "MarketQuoteIn",
    "TimelinePointIn",
    "ValuationRequest",
    "SnapshotIn",
    "SnapshotRequest",
    # Valuation responses
    "ValuedHoldingResponse",
    "AllocationEntry",
    "SnapshotResponse",
    "PortfolioValuationResponse",
    "ValuationHistoryResponse",
    "SnapshotMergeResponse",
]
