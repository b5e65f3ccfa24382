# asset_insights/__init__.py
"""Multi-currency portfolio valuation and value-history reconstruction."""

__version__ = "0.1.0"
