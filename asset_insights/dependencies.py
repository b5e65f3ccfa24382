# asset_insights/dependencies.py
"""
FastAPI dependency providers.

Services are stateless, so one instance per process is enough. Using
@lru_cache makes each provider a lazy singleton; tests swap it out with
app.dependency_overrides.

Usage:
    @router.post("/valuation")
    def value(service: ValuationService = Depends(get_valuation_service)):
        ...
"""

import logging
from decimal import Decimal
from functools import lru_cache

from asset_insights.config import settings
from asset_insights.services.market_data import resolve_rate_table
from asset_insights.services.valuation.service import ValuationService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_valuation_service() -> ValuationService:
    """Singleton ValuationService configured from settings."""
    logger.debug("Initializing singleton ValuationService")
    return ValuationService(
        anchor_currency=settings.anchor_currency,
        supported_currencies=settings.supported_currencies,
    )


def get_fallback_rates() -> dict[str, Decimal]:
    """
    Configured fallback rate table, anchor forced to 1.

    Routers pass request rates through resolve_rate_table() with this as the
    fallback when the client has no live exchange rates.
    """
    return resolve_rate_table(None, settings.fallback_rates, settings.anchor_currency)
