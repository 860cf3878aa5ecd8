# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# Builds the service graph once per application and exposes its parts to
# route handlers through Depends().
#
# Every collaborator is constructed explicitly and injected; nothing reaches
# for a process-wide singleton, so tests can hand create_app() a graph made
# of fakes.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Request

from app.config import Settings
from core.services.favorites_synchronizer import FavoritesSynchronizer
from core.services.forecast_service import ForecastService
from core.services.location_service import LocationService
from core.services.remote_write_queue import RemoteWriteQueue
from core.services.session_selection import SessionSelection
from lib.identity import IdentityProvider
from lib.local_cache import LocalFavoritesCache
from lib.remote_store import RemoteFavoritesStore
from lib.supabase_client import SupabaseClient
from lib.weather_client import WeatherClient

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the routes need, wired together."""
    synchronizer: FavoritesSynchronizer
    selection: SessionSelection
    location: LocationService
    forecast: ForecastService
    weather: Any  # WeatherClient or a stand-in with fetch()/aclose()
    supabase: Any  # SupabaseClient or a stand-in with ping()

    async def aclose(self) -> None:
        """Flush pending remote writes and release HTTP resources."""
        self.selection.detach()
        await self.synchronizer.close()
        await self.weather.aclose()


def build_services(settings: Settings) -> Services:
    """
    Construct the production service graph from settings.

    No network I/O happens here; Supabase connects on first use.
    """
    supabase = SupabaseClient.from_settings(settings)
    synchronizer = FavoritesSynchronizer(
        cache=LocalFavoritesCache(settings.FAVORITES_CACHE_PATH),
        remote=RemoteFavoritesStore(supabase),
        identity=IdentityProvider.for_supabase(supabase),
        write_queue=RemoteWriteQueue(),
    )
    selection = SessionSelection(synchronizer)
    location = LocationService()
    weather = WeatherClient.from_settings(settings)
    forecast = ForecastService(
        weather=weather,
        selection=selection,
        location=location,
        jitter_degrees=settings.LOCATION_JITTER_DEGREES,
    )

    logger.info(f"Favorites cache at {settings.FAVORITES_CACHE_PATH}, table '{settings.SUPABASE_FAVORITES_TABLE}'")
    return Services(
        synchronizer=synchronizer,
        selection=selection,
        location=location,
        forecast=forecast,
        weather=weather,
        supabase=supabase,
    )


# =============================================================================
# Dependency functions
# =============================================================================

def get_services(request: Request) -> Services:
    """Return the service graph built during application startup."""
    return request.app.state.services


def get_synchronizer(services: Services = Depends(get_services)) -> FavoritesSynchronizer:
    return services.synchronizer


def get_selection(services: Services = Depends(get_services)) -> SessionSelection:
    return services.selection


def get_location(services: Services = Depends(get_services)) -> LocationService:
    return services.location


def get_forecast(services: Services = Depends(get_services)) -> ForecastService:
    return services.forecast


# Type aliases for dependency injection
ServicesDep = Annotated[Services, Depends(get_services)]
SynchronizerDep = Annotated[FavoritesSynchronizer, Depends(get_synchronizer)]
SelectionDep = Annotated[SessionSelection, Depends(get_selection)]
LocationDep = Annotated[LocationService, Depends(get_location)]
ForecastDep = Annotated[ForecastService, Depends(get_forecast)]
