# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .remote_write_queue import FailedWrite, RemoteWriteQueue
from .favorites_synchronizer import FavoritesSynchronizer, merge_favorites, validate_place
from .session_selection import SessionSelection
from .location_service import LocationService
from .forecast_service import ForecastService

__all__ = [
    "FailedWrite",
    "RemoteWriteQueue",
    "FavoritesSynchronizer",
    "merge_favorites",
    "validate_place",
    "SessionSelection",
    "LocationService",
    "ForecastService",
]
