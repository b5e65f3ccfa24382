# asset_insights/schemas/errors.py
"""
Pydantic schemas for error responses.

Every non-2xx response body uses one of these shapes. Built by the global
exception handlers in main.py.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Error body for domain errors (400) and unexpected failures (500)."""

    error: str = Field(
        ...,
        description="Exception class name (e.g., 'UnsupportedCurrencyError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Structured context such as the offending field or holding id"
    )


class ValidationErrorDetail(BaseModel):
    """Error body for request bodies that fail schema validation (422)."""

    error: str = Field(default="RequestValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="One entry per failing field: field, message, type"
    )
