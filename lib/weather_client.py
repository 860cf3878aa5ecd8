# =============================================================================
# lib/weather_client.py - Open-Meteo Forecast Client
# =============================================================================
# Fetches current conditions plus the daily forecast for one coordinate.
#
# Failures here ARE user-visible (there is no offline forecast), so they are
# raised as WeatherServiceError subclasses carrying a short user message:
# - WeatherNetworkError: transport error or non-200 status
# - WeatherParseError: body is not the expected JSON shape
#
# Usage:
#   client = WeatherClient.from_settings(settings)
#   forecast = await client.fetch(40.7128, -74.006)
#   await client.aclose()
# =============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from core.models.weather import WeatherResponse
from lib.utils import ApplicationError

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"
DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum"


class WeatherServiceError(ApplicationError):
    """Forecast could not be obtained."""

    def __init__(self, message: str, code: str, details: dict | None = None):
        super().__init__(
            message,
            code=code,
            suggestion="Check connectivity and try again",
            details=details,
        )


class WeatherNetworkError(WeatherServiceError):
    """Transport failure or non-200 response."""

    user_message = "Network error."

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, code="WEATHER_NETWORK_ERROR", details={"status_code": status_code})
        self.status_code = status_code


class WeatherParseError(WeatherServiceError):
    """Response body could not be decoded into a forecast."""

    user_message = "Could not parse weather data."

    def __init__(self, message: str):
        super().__init__(message, code="WEATHER_PARSE_ERROR")


class WeatherClient:
    """
    Thin async wrapper over the Open-Meteo forecast endpoint.

    An httpx.AsyncClient may be injected (tests use httpx.MockTransport);
    otherwise one is created and closed by aclose().
    """

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1/forecast",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> WeatherClient:
        return cls(
            base_url=settings.WEATHER_API_URL,
            timeout=settings.WEATHER_TIMEOUT_SECONDS,
        )

    async def fetch(self, latitude: float, longitude: float) -> WeatherResponse:
        """
        Fetch current and daily weather for a coordinate.

        Args:
            latitude: Degrees, -90 to 90
            longitude: Degrees, -180 to 180

        Returns:
            Decoded WeatherResponse

        Raises:
            WeatherNetworkError: On transport errors or non-200 responses
            WeatherParseError: If the body cannot be decoded
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "daily": DAILY_FIELDS,
            "timezone": "auto",
        }

        try:
            response = await self._http.get(self._base_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Weather request failed for ({latitude}, {longitude}): {e}")
            raise WeatherNetworkError(f"Weather request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Weather API returned {response.status_code} for ({latitude}, {longitude})")
            raise WeatherNetworkError(
                f"Weather API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            forecast = WeatherResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Weather response could not be decoded: {e.error_count()} error(s)")
            raise WeatherParseError(f"Unexpected weather response: {e.error_count()} error(s)") from e

        logger.debug(f"Fetched forecast for ({latitude}, {longitude}): {len(forecast.daily)} days")
        return forecast

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()
