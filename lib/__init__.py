# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains the leaf components the favorites core depends on:
# - supabase_client.py: Injected async Supabase handle
# - remote_store.py: Remote favorites table (fetch/upsert/delete)
# - identity.py: Single-flight anonymous identity
# - local_cache.py: On-disk JSON snapshot of favorites
# - weather_client.py: Open-Meteo forecast client
# - utils.py: Shared utilities (error base class, UUID normalization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.remote_store import RemoteFavoritesStore, SyncFailure
from lib.identity import IdentityProvider, IdentityUnavailable
from lib.local_cache import LocalFavoritesCache, PersistenceFailure
from lib.weather_client import (
    WeatherClient,
    WeatherNetworkError,
    WeatherParseError,
    WeatherServiceError,
)
from lib.utils import ApplicationError, normalize_uuid, one_line_error

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Remote store
    "RemoteFavoritesStore",
    "SyncFailure",
    # Identity
    "IdentityProvider",
    "IdentityUnavailable",
    # Local cache
    "LocalFavoritesCache",
    "PersistenceFailure",
    # Weather
    "WeatherClient",
    "WeatherNetworkError",
    "WeatherParseError",
    "WeatherServiceError",
    # Utils
    "ApplicationError",
    "normalize_uuid",
    "one_line_error",
]
