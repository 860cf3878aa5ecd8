# =============================================================================
# core/models/sync.py - Synchronization State Schemas
# =============================================================================
# - SyncState: Where the favorites synchronizer is in its startup/sync cycle
# - FavoritesSnapshot: Immutable view published to subscribers
#
# Flow: idle -> loading_local -> ready_local -> authenticating
#       -> syncing_remote -> ready_merged
# Failures while authenticating or syncing fall back to ready_local.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .place import Place


class SyncState(str, Enum):
    """
    Synchronizer lifecycle states.

    - idle: Nothing loaded yet
    - loading_local: Reading the local cache snapshot
    - ready_local: Local data usable, remote not (yet) merged
    - authenticating: Resolving the anonymous user id
    - syncing_remote: Fetching the remote favorites list
    - ready_merged: Local and remote merged
    """
    IDLE = "idle"
    LOADING_LOCAL = "loading_local"
    READY_LOCAL = "ready_local"
    AUTHENTICATING = "authenticating"
    SYNCING_REMOTE = "syncing_remote"
    READY_MERGED = "ready_merged"

    @property
    def is_ready(self) -> bool:
        """True when favorites can be read without waiting."""
        return self in (SyncState.READY_LOCAL, SyncState.READY_MERGED)


class FavoritesSnapshot(BaseModel):
    """
    Point-in-time view of the favorite set.

    Published after every change; version increases by one per publish so
    consumers can drop out-of-order deliveries.
    """

    model_config = ConfigDict(frozen=True)

    places: tuple[Place, ...] = Field(default_factory=tuple)
    state: SyncState = SyncState.IDLE
    owner_id: str | None = None
    version: int = 0
    last_synced_at: datetime | None = None

    def contains(self, place_id) -> bool:
        """Check whether a place id is part of this snapshot."""
        return any(place.id == place_id for place in self.places)

    def find(self, place_id) -> Place | None:
        """Return the place with the given id, if present."""
        return next((place for place in self.places if place.id == place_id), None)
