# asset_insights/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive all market data as parameters
- Are easily testable via dependency injection

Only the exceptions are re-exported here; import services from their
packages so that asset_insights.config can read services.constants
without pulling in the whole engine.

Usage:
    from asset_insights.services import ValidationError
    from asset_insights.services.valuation import ValuationService
    from asset_insights.services.market_data import build_market_quotes

Architecture:
    services/
    ├── __init__.py                  # This file - exception exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Engine defaults
    ├── market_data/                 # Collaborator output normalization
    │   └── normalization.py
    └── valuation/                   # Valuation engine
        ├── service.py               # Main valuation orchestrator
        ├── types.py                 # Valuation data types
        ├── calculators.py           # Point-in-time calculations
        └── history_calculator.py    # Timeline reconstruction
"""

from asset_insights.services.exceptions import (
    InvalidHoldingError,
    ServiceError,
    UnsupportedCurrencyError,
    ValidationError,
)

__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidHoldingError",
    "UnsupportedCurrencyError",
]
