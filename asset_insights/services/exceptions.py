# asset_insights/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The API layer (asset_insights/main.py) maps them to HTTP responses.

Missing market data is never an exception: the engine degrades to zero
values and warnings. Only inputs that would silently corrupt sums are
rejected, before any computation runs.

Exception Hierarchy:
    ServiceError (base)
    └── ValidationError
        ├── InvalidHoldingError
        └── UnsupportedCurrencyError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when engine input fails validation.

    This is for programmatic validation of domain objects, NOT for request
    parsing which is handled by Pydantic.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidHoldingError(ValidationError):
    """
    Raised when a holding cannot be valued safely.

    Examples:
    - Negative or non-finite amount
    - Category outside the canonical set
    - Empty or duplicate id

    Attributes:
        holding_id: Id of the offending holding (may be empty)
        reason: What is wrong with it
    """

    def __init__(self, holding_id: str, reason: str, field: str | None = None) -> None:
        self.holding_id = holding_id
        self.reason = reason
        super().__init__(f"Invalid holding '{holding_id}': {reason}", field=field)


class UnsupportedCurrencyError(ValidationError):
    """
    Raised when the requested display currency is not supported.

    Attributes:
        currency: The requested currency code
        supported: Currency codes that are accepted
    """

    def __init__(self, currency: str, supported: tuple[str, ...]) -> None:
        self.currency = currency
        self.supported = supported
        super().__init__(
            f"Unsupported display currency: '{currency}'. "
            f"Valid options: {', '.join(supported)}",
            field="display_currency",
        )


__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidHoldingError",
    "UnsupportedCurrencyError",
]
