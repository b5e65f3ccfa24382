# asset_insights/routers/__init__.py
"""
API routers.

Usage:
    from asset_insights.routers import valuation_router

    app.include_router(valuation_router)
"""

from asset_insights.routers.valuation import router as valuation_router

__all__ = [
    "valuation_router",
]
