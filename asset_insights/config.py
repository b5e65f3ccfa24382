# asset_insights/config.py
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (or a .env file in the
project root) with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- LOG_LEVEL / LOG_FORMAT: Logging configuration
- ANCHOR_CURRENCY: Reference currency of rate tables
- DEFAULT_DISPLAY_CURRENCY: Currency used when a request doesn't pick one
- SUPPORTED_CURRENCIES: Display currencies the dashboard offers
- FALLBACK_RATES: Rate table used when the exchange-rate feed is unavailable

List and dict settings are given as JSON in the environment, e.g.
    SUPPORTED_CURRENCIES='["TWD","USD"]'
    FALLBACK_RATES='{"USD": 1, "TWD": 31.8}'

Usage:
    from asset_insights.config import settings

    display_currency = request.display_currency or settings.default_display_currency
"""
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from asset_insights.services.constants import (
    DEFAULT_ANCHOR_CURRENCY,
    DEFAULT_DISPLAY_CURRENCY,
    FALLBACK_RATES,
    SUPPORTED_CURRENCIES,
)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - APP_NAME: Application name (default: "Asset Insights")
        - DEBUG: Enable debug mode (default: False)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    app_name: str = "Asset Insights"
    debug: bool = False

    # =========================================================================
    # LOGGING
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format"
    )

    # =========================================================================
    # CURRENCIES
    # =========================================================================
    anchor_currency: str = Field(
        default=DEFAULT_ANCHOR_CURRENCY,
        description="Reference currency of rate tables (its rate is always 1)"
    )
    default_display_currency: str = Field(
        default=DEFAULT_DISPLAY_CURRENCY,
        description="Display currency used when none is requested"
    )
    supported_currencies: list[str] = Field(
        default=list(SUPPORTED_CURRENCIES),
        min_length=1,
        description="Display currencies offered to users"
    )
    fallback_rates: dict[str, Decimal] = Field(
        default_factory=lambda: dict(FALLBACK_RATES),
        description="Rate table used when no rates are supplied"
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"],
        description="Allowed HTTP methods for CORS"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        description="Allowed HTTP headers for CORS"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("anchor_currency", "default_display_currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("supported_currencies")
    @classmethod
    def normalize_supported(cls, value: list[str]) -> list[str]:
        return [code.strip().upper() for code in value]

    @field_validator("fallback_rates")
    @classmethod
    def validate_fallback_rates(cls, value: dict[str, Decimal]) -> dict[str, Decimal]:
        normalized = {code.strip().upper(): rate for code, rate in value.items()}
        for code, rate in normalized.items():
            if rate <= 0:
                raise ValueError(f"Fallback rate for {code} must be positive, got {rate}")
        return normalized

    @model_validator(mode="after")
    def validate_currency_config(self) -> "Settings":
        """
        Validate that configured currencies are consistent.

        Rules:
        - anchor_currency and default_display_currency must be supported
        - the anchor's fallback rate, if present, must be 1
        """
        for name in ("anchor_currency", "default_display_currency"):
            code = getattr(self, name)
            if code not in self.supported_currencies:
                raise ValueError(
                    f"{name.upper()} '{code}' is not in SUPPORTED_CURRENCIES "
                    f"({', '.join(self.supported_currencies)})"
                )

        anchor_rate = self.fallback_rates.get(self.anchor_currency)
        if anchor_rate is not None and anchor_rate != Decimal("1"):
            raise ValueError(
                f"Fallback rate for anchor currency {self.anchor_currency} must be 1, "
                f"got {anchor_rate}"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
