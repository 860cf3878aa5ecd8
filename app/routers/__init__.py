# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - favorites.py: Favorite places (list, add, remove, sync)
# - selection.py: Active favorite selection
# - location.py: Device location reports
# - weather.py: Forecast for the active location or a coordinate
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import favorites
from . import selection
from . import location
from . import weather

__all__ = [
    "health",
    "favorites",
    "selection",
    "location",
    "weather",
]
