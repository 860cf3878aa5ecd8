# =============================================================================
# core/services/forecast_service.py - Forecast For The Active Location
# =============================================================================
# Picks the coordinate to show weather for and fetches it:
# - a selected favorite wins
# - otherwise the latest device fix
# - otherwise a user-visible location error
#
# In device-location mode small GPS jitter (under LOCATION_JITTER_DEGREES on
# both axes) does not trigger a refetch; the previous forecast is returned.
# Weather failures are surfaced, unlike favorites sync failures.
# =============================================================================

import logging
from datetime import UTC, datetime
from uuid import UUID

from app.exceptions import LocationDeniedError, LocationUnavailableError, WeatherUnavailableError
from core.models.weather import ForecastSource, LocatedForecast
from core.services.contracts import WeatherSource
from core.services.location_service import LocationService
from core.services.session_selection import SessionSelection
from lib.weather_client import WeatherServiceError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Current Location"


class ForecastService:
    """
    Weather for whatever location is currently active.

    Example:
        service = ForecastService(weather_client, selection, location)
        forecast = await service.load()
        forecast.title, forecast.condition
    """

    def __init__(
        self,
        weather: WeatherSource,
        selection: SessionSelection,
        location: LocationService,
        jitter_degrees: float = 0.0005,
    ):
        self._weather = weather
        self._selection = selection
        self._location = location
        self._jitter_degrees = jitter_degrees
        self._last: LocatedForecast | None = None

    @property
    def last_forecast(self) -> LocatedForecast | None:
        return self._last

    def active_coordinate(self) -> tuple[float, float] | None:
        """Selected favorite's coordinate, else the device fix, else None."""
        selected = self._selection.selected
        if selected is not None:
            return selected.coordinate
        return self._location.current.coordinate

    def header_title(self) -> str:
        selected = self._selection.selected
        if selected is not None:
            return selected.name
        return self._location.current.placename or DEFAULT_TITLE

    async def load(self, force: bool = False) -> LocatedForecast:
        """
        Fetch the forecast for the active location.

        Args:
            force: Refetch even if the device has not moved

        Raises:
            LocationDeniedError: No favorite selected and permission denied
            LocationUnavailableError: No favorite selected and no fix yet
            WeatherUnavailableError: The weather API failed
        """
        selected = self._selection.selected
        coordinate = self.active_coordinate()

        if coordinate is None:
            if not self._location.current.is_authorized:
                raise LocationDeniedError()
            raise LocationUnavailableError()

        if selected is None and not force and self._is_jitter(coordinate):
            logger.debug(f"Device moved less than {self._jitter_degrees} degrees, reusing forecast")
            return self._last

        source = ForecastSource.DEVICE if selected is None else ForecastSource.FAVORITE
        forecast = await self._fetch(
            coordinate,
            title=self.header_title(),
            source=source,
            place_id=selected.id if selected is not None else None,
        )
        self._last = forecast
        return forecast

    async def forecast_for(self, latitude: float, longitude: float) -> LocatedForecast:
        """
        Fetch the forecast for an explicit coordinate (does not touch state).

        Raises:
            WeatherUnavailableError: The weather API failed
        """
        return await self._fetch(
            (latitude, longitude),
            title=f"{latitude:.4f}, {longitude:.4f}",
            source=ForecastSource.COORDINATE,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _is_jitter(self, coordinate: tuple[float, float]) -> bool:
        last = self._last
        if last is None or last.source != ForecastSource.DEVICE:
            return False
        return (
            abs(last.latitude - coordinate[0]) < self._jitter_degrees
            and abs(last.longitude - coordinate[1]) < self._jitter_degrees
        )

    async def _fetch(
        self,
        coordinate: tuple[float, float],
        title: str,
        source: ForecastSource,
        place_id: UUID | None = None,
    ) -> LocatedForecast:
        latitude, longitude = coordinate
        try:
            weather = await self._weather.fetch(latitude, longitude)
        except WeatherServiceError as e:
            raise WeatherUnavailableError(e.user_message, reason=e.code) from e

        return LocatedForecast(
            title=title,
            latitude=latitude,
            longitude=longitude,
            source=source,
            place_id=place_id,
            condition=weather.current.condition,
            weather=weather,
            fetched_at=datetime.now(UTC),
        )
