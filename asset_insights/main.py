# asset_insights/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)

Run:
    uvicorn asset_insights.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from asset_insights import __version__
from asset_insights.config import settings
from asset_insights.middleware import CorrelationIdMiddleware
from asset_insights.routers import valuation_router
from asset_insights.schemas.errors import ErrorDetail, ValidationErrorDetail
from asset_insights.services.exceptions import (
    InvalidHoldingError,
    ServiceError,
    UnsupportedCurrencyError,
    ValidationError,
)
from asset_insights.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Multi-currency portfolio valuation and value history API",
    version=__version__,
)

# =============================================================================
# MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=["X-Correlation-ID"],
)

app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
# Order matters: specific handlers before the ServiceError catch-all

@app.exception_handler(InvalidHoldingError)
async def invalid_holding_handler(
    request: Request, exc: InvalidHoldingError
) -> JSONResponse:
    """Handle malformed holdings (400)."""
    logger.warning(f"Invalid holding: {exc}")
    details = {"holding_id": exc.holding_id}
    if exc.field:
        details["field"] = exc.field
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="InvalidHoldingError",
            message=str(exc),
            details=details,
        ).model_dump(),
    )


@app.exception_handler(UnsupportedCurrencyError)
async def unsupported_currency_handler(
    request: Request, exc: UnsupportedCurrencyError
) -> JSONResponse:
    """Handle display currencies outside the supported set (400)."""
    logger.warning(f"Unsupported currency: {exc.currency}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="UnsupportedCurrencyError",
            message=str(exc),
            details={"field": exc.field, "supported": list(exc.supported)},
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Handle other domain validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="ValidationError",
            message=str(exc),
            details={"field": exc.field} if exc.field else None,
        ).model_dump(),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="ServiceError",
            message=str(exc),
            details=None,
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors, including routing 404 / 405, in the ErrorDetail format."""
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        500: "InternalServerError",
    }
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_types.get(exc.status_code, "HTTPError"),
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies (422).

    Flattens Pydantic's error list into field / message / type entries.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(details=errors).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(valuation_router)  # /valuation/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """
    Liveness check.

    The service has no external dependencies to check: valuations are pure
    computations over the request body.
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "environment": settings.environment,
        "supported_currencies": settings.supported_currencies,
    }
