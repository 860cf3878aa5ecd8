# =============================================================================
# core/models/weather.py - Forecast Schemas
# =============================================================================
# Decodes the Open-Meteo forecast response:
# - CurrentConditions: Temperature, humidity, wind, WMO weather code
# - DailyForecast: Parallel arrays of dates and daily aggregates
# - WeatherResponse: current + daily
# - WeatherCondition: Coarse classification of WMO weather codes
#
# Field aliases match the API's query names (temperature_2m, ...), so the
# response body can be validated directly.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WeatherCondition(str, Enum):
    """
    Coarse sky condition derived from a WMO weather code.

    Unknown codes fall back to CLOUDY.
    """
    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    FOG = "fog"
    RAIN = "rain"
    SNOW = "snow"
    SHOWERS = "showers"
    THUNDERSTORM = "thunderstorm"

    @classmethod
    def from_code(cls, code: int) -> "WeatherCondition":
        return _CONDITION_BY_CODE.get(code, cls.CLOUDY)


_CONDITION_BY_CODE: dict[int, WeatherCondition] = {
    0: WeatherCondition.CLEAR,
    1: WeatherCondition.PARTLY_CLOUDY,
    2: WeatherCondition.PARTLY_CLOUDY,
    3: WeatherCondition.CLOUDY,
    45: WeatherCondition.FOG,
    48: WeatherCondition.FOG,
    **{code: WeatherCondition.RAIN for code in (51, 53, 55, 61, 63, 65)},
    **{code: WeatherCondition.SNOW for code in (71, 73, 75, 77)},
    **{code: WeatherCondition.SHOWERS for code in (80, 81, 82)},
    **{code: WeatherCondition.THUNDERSTORM for code in (95, 96, 99)},
}


class CurrentConditions(BaseModel):
    """Current observation block (metric units as returned by the API)."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float = Field(..., alias="temperature_2m", description="Air temperature, °C")
    humidity: float = Field(..., alias="relative_humidity_2m", description="Relative humidity, %")
    wind_speed: float = Field(..., alias="wind_speed_10m", description="Wind speed at 10 m")
    weather_code: int = Field(..., alias="weather_code", description="WMO weather code")

    @property
    def condition(self) -> WeatherCondition:
        return WeatherCondition.from_code(self.weather_code)


class DailyForecast(BaseModel):
    """
    Daily forecast block.

    The API returns one array per variable; all arrays are indexed by day,
    so they must have the same length.
    """

    model_config = ConfigDict(populate_by_name=True)

    dates: list[date] = Field(..., alias="time")
    temp_max: list[float] = Field(..., alias="temperature_2m_max")
    temp_min: list[float] = Field(..., alias="temperature_2m_min")
    precipitation_sum: list[float] = Field(..., alias="precipitation_sum")

    @model_validator(mode="after")
    def arrays_aligned(self) -> "DailyForecast":
        lengths = {
            len(self.dates),
            len(self.temp_max),
            len(self.temp_min),
            len(self.precipitation_sum),
        }
        if len(lengths) != 1:
            raise ValueError("Daily forecast arrays have mismatched lengths")
        return self

    def __len__(self) -> int:
        return len(self.dates)


class WeatherResponse(BaseModel):
    """
    Forecast for one coordinate.

    Example (API form):
        {
            "current": {"temperature_2m": 21.4, "relative_humidity_2m": 40,
                        "wind_speed_10m": 3.2, "weather_code": 1},
            "daily": {"time": ["2025-09-08"], "temperature_2m_max": [25.0],
                      "temperature_2m_min": [15.1], "precipitation_sum": [0.0]}
        }
    """

    current: CurrentConditions
    daily: DailyForecast


class ForecastSource(str, Enum):
    """Where the forecast coordinate came from."""
    FAVORITE = "favorite"
    DEVICE = "device"
    COORDINATE = "coordinate"


class LocatedForecast(BaseModel):
    """
    A forecast together with the place it was fetched for.

    title follows the home screen header: the favorite's name, the device's
    reverse-geocoded placename, or "Current Location".
    """

    title: str
    latitude: float
    longitude: float
    source: ForecastSource
    place_id: UUID | None = None
    condition: WeatherCondition
    weather: WeatherResponse
    fetched_at: datetime
