# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - place.py: Favorite place, create payload, remote row shape
# - sync.py: Synchronizer state and published snapshots
# - location.py: Device location reports
# - weather.py: Open-Meteo forecast response
#
# These models define the "contract" between the core, storage and API.
# =============================================================================

# -----------------------------------------------------------------------------
# Place Models - Saved favorites
# -----------------------------------------------------------------------------
from .place import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    Place,
    PlaceCreate,
    RemotePlaceRecord,
)

# -----------------------------------------------------------------------------
# Sync Models - Synchronizer state
# -----------------------------------------------------------------------------
from .sync import (
    FavoritesSnapshot,
    SyncState,
)

# -----------------------------------------------------------------------------
# Location Models - Device location feed
# -----------------------------------------------------------------------------
from .location import (
    DeviceLocation,
    LocationUpdate,
)

# -----------------------------------------------------------------------------
# Weather Models - Forecast responses
# -----------------------------------------------------------------------------
from .weather import (
    CurrentConditions,
    DailyForecast,
    ForecastSource,
    LocatedForecast,
    WeatherCondition,
    WeatherResponse,
)

__all__ = [
    # Place
    "MAX_LATITUDE",
    "MAX_LONGITUDE",
    "MIN_LATITUDE",
    "MIN_LONGITUDE",
    "Place",
    "PlaceCreate",
    "RemotePlaceRecord",
    # Sync
    "FavoritesSnapshot",
    "SyncState",
    # Location
    "DeviceLocation",
    "LocationUpdate",
    # Weather
    "CurrentConditions",
    "DailyForecast",
    "ForecastSource",
    "LocatedForecast",
    "WeatherCondition",
    "WeatherResponse",
]
