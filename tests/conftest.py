# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory fakes for the local cache, remote store and identity provider
# - Common place fixtures
# =============================================================================

import asyncio
import os
from typing import Sequence
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.place import Place
from core.models.weather import WeatherResponse
from lib.identity import IdentityUnavailable
from lib.remote_store import SyncFailure


# =============================================================================
# Fakes
# =============================================================================

class FakeCache:
    """In-memory FavoritesCache that records every save."""

    def __init__(self, places: Sequence[Place] = ()):
        self.places = list(places)
        self.saves: list[list[Place]] = []
        self.loads = 0
        self.fail_saves = False

    async def load_snapshot(self) -> list[Place]:
        self.loads += 1
        return list(self.places)

    async def save_snapshot(self, places: Sequence[Place]) -> bool:
        if self.fail_saves:
            return False
        self.places = list(places)
        self.saves.append(list(places))
        return True


class FakeRemote:
    """
    In-memory FavoritesRemote keyed by owner id.

    Set `fail` to make every call raise SyncFailure. Set `gate` to an
    asyncio.Event to hold fetch_all until the test releases it.
    """

    def __init__(self, rows: dict[str, list[Place]] | None = None):
        self.rows: dict[str, list[Place]] = {k: list(v) for k, v in (rows or {}).items()}
        self.calls: list[tuple] = []
        self.fail = False
        self.gate: asyncio.Event | None = None

    async def fetch_all(self, owner_id: str) -> list[Place]:
        self.calls.append(("fetch_all", owner_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise SyncFailure("remote unavailable", operation="fetch_all")
        return list(self.rows.get(owner_id, []))

    async def upsert(self, place: Place, owner_id: str) -> None:
        self.calls.append(("upsert", place.id, owner_id))
        if self.fail:
            raise SyncFailure("remote unavailable", operation="upsert")
        owned = [p for p in self.rows.get(owner_id, []) if p.id != place.id]
        self.rows[owner_id] = [*owned, place]

    async def delete(self, place_id: UUID, owner_id: str) -> None:
        self.calls.append(("delete", place_id, owner_id))
        if self.fail:
            raise SyncFailure("remote unavailable", operation="delete")
        self.rows[owner_id] = [p for p in self.rows.get(owner_id, []) if p.id != place_id]

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeIdentity:
    """IdentitySource with a fixed id; set `fail` to refuse sign-in."""

    def __init__(self, user_id: str = "user-1"):
        self._id = user_id
        self._established: str | None = None
        self.fail = False
        self.calls = 0

    @property
    def user_id(self) -> str | None:
        return self._established

    async def ensure_identity(self) -> str:
        self.calls += 1
        if self.fail:
            raise IdentityUnavailable("sign-in disabled")
        self._established = self._id
        return self._id


class FakeWeather:
    """WeatherSource returning a fixed forecast, or raising `error`."""

    def __init__(self, payload: dict):
        self.response = WeatherResponse.model_validate(payload)
        self.calls: list[tuple[float, float]] = []
        self.error: Exception | None = None
        self.closed = False

    async def fetch(self, latitude: float, longitude: float) -> WeatherResponse:
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def nyc():
    """New York City favorite."""
    return Place(
        id=UUID("00000000-0000-4000-8000-000000000001"),
        name="NYC",
        latitude=40.7128,
        longitude=-74.0060,
    )


@pytest.fixture
def austin():
    """Austin favorite."""
    return Place(
        id=UUID("00000000-0000-4000-8000-000000000002"),
        name="Austin",
        latitude=30.2672,
        longitude=-97.7431,
    )


@pytest.fixture
def weather_payload():
    """Open-Meteo forecast response body."""
    return {
        "latitude": 40.71,
        "longitude": -74.01,
        "timezone": "America/New_York",
        "current": {
            "time": "2025-09-08T10:00",
            "temperature_2m": 21.4,
            "relative_humidity_2m": 40,
            "wind_speed_10m": 3.2,
            "weather_code": 1,
        },
        "daily": {
            "time": ["2025-09-08", "2025-09-09", "2025-09-10"],
            "temperature_2m_max": [25.0, 24.1, 22.8],
            "temperature_2m_min": [15.1, 14.9, 13.0],
            "precipitation_sum": [0.0, 1.2, 4.5],
        },
    }
