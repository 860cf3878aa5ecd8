# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API and the favorites core.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Only PlaceValidationError is raised by the favorites core to its callers;
# storage and sync failures are absorbed there. Weather and location errors
# are user-visible because the forecast has no offline fallback.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError


class WeatherAppException(Exception):
    """
    Base exception for the WeatherApp API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "WEATHERAPP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Favorites Exceptions
# =============================================================================

class PlaceValidationError(WeatherAppException):
    """Raised when a favorite has a blank name or out-of-range coordinates."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(
            message=message,
            code="PLACE_VALIDATION_ERROR",
            status_code=400,
            suggestion="Latitude must be within [-90, 90] and longitude within [-180, 180]; name must not be blank",
            details={"errors": errors or []}
        )

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "PlaceValidationError":
        """Summarize a pydantic ValidationError into a PlaceValidationError."""
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        if errors:
            first = errors[0]
            message = f"Invalid {first['field'] or 'place'}: {first['message']}"
        else:
            message = "Invalid place"
        return cls(message, errors=errors)


class PlaceNotFoundError(WeatherAppException):
    """Raised when a place id is not part of the current favorite set."""

    def __init__(self, place_id: str):
        super().__init__(
            message=f"Favorite not found: {place_id}",
            code="PLACE_NOT_FOUND",
            status_code=404,
            suggestion="List favorites with GET /favorites and pick an existing id",
            details={"place_id": place_id}
        )


# =============================================================================
# Location Exceptions
# =============================================================================

class LocationDeniedError(WeatherAppException):
    """Raised when weather is requested for the device but permission is denied."""

    def __init__(self):
        super().__init__(
            message="Location permission denied.",
            code="LOCATION_DENIED",
            status_code=403,
            suggestion="Enable location permission or select a favorite place",
        )


class LocationUnavailableError(WeatherAppException):
    """Raised when no favorite is selected and no device fix has arrived yet."""

    def __init__(self):
        super().__init__(
            message="Current location is not available yet.",
            code="LOCATION_UNAVAILABLE",
            status_code=409,
            suggestion="Report a location with PUT /location or select a favorite place",
        )


# =============================================================================
# Weather Exceptions
# =============================================================================

class WeatherUnavailableError(WeatherAppException):
    """Raised when the forecast cannot be fetched or decoded."""

    def __init__(self, message: str, reason: str):
        super().__init__(
            message=message,
            code="WEATHER_UNAVAILABLE",
            status_code=502,
            suggestion="Try again in a moment; pull to refresh",
            details={"reason": reason}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def weatherapp_exception_handler(
    request: Request,
    exc: WeatherAppException
) -> JSONResponse:
    """
    Convert WeatherAppException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors())
        }
    )
