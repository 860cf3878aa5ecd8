# =============================================================================
# core/services/contracts.py - Collaborator Interfaces
# =============================================================================
# Structural types for what the favorites synchronizer needs from its
# collaborators. lib/ provides the real implementations; tests pass fakes.
# =============================================================================

from typing import Protocol, Sequence
from uuid import UUID

from core.models.place import Place
from core.models.weather import WeatherResponse


class FavoritesCache(Protocol):
    """Whole-snapshot local persistence. Never raises."""

    async def load_snapshot(self) -> list[Place]: ...

    async def save_snapshot(self, places: Sequence[Place]) -> bool: ...


class FavoritesRemote(Protocol):
    """Remote favorites collection scoped by owner id. Raises SyncFailure."""

    async def fetch_all(self, owner_id: str) -> list[Place]: ...

    async def upsert(self, place: Place, owner_id: str) -> None: ...

    async def delete(self, place_id: UUID, owner_id: str) -> None: ...


class IdentitySource(Protocol):
    """Opaque user id provider. Raises IdentityUnavailable."""

    @property
    def user_id(self) -> str | None: ...

    async def ensure_identity(self) -> str: ...


class WeatherSource(Protocol):
    """Weather lookup for a coordinate. Raises WeatherServiceError."""

    async def fetch(self, latitude: float, longitude: float) -> WeatherResponse: ...
