# =============================================================================
# app/routers/weather.py - Forecast Endpoints
# =============================================================================
# Weather for the active location (selected favorite or device), or for an
# explicit coordinate. Failures here are returned to the client as errors.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import ForecastDep
from core.models.weather import LocatedForecast

router = APIRouter()


@router.get("", response_model=LocatedForecast, response_model_by_alias=False)
async def get_active_forecast(
    forecast: ForecastDep,
    refresh: Annotated[bool, Query(description="Refetch even if the device has not moved")] = False,
):
    """
    Forecast for the active location.

    Errors:
    - 403 LOCATION_DENIED: no favorite selected and permission denied
    - 409 LOCATION_UNAVAILABLE: no favorite selected and no fix yet
    - 502 WEATHER_UNAVAILABLE: the weather API failed
    """
    return await forecast.load(force=refresh)


@router.get("/{latitude}/{longitude}", response_model=LocatedForecast, response_model_by_alias=False)
async def get_forecast_for_coordinate(
    latitude: Annotated[float, Path(ge=-90, le=90)],
    longitude: Annotated[float, Path(ge=-180, le=180)],
    forecast: ForecastDep,
):
    """Forecast for an explicit coordinate."""
    return await forecast.forecast_for(latitude, longitude)
