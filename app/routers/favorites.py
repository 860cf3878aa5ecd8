# =============================================================================
# app/routers/favorites.py - Favorite Places Endpoints
# =============================================================================
# Read the favorite set, add and remove favorites, trigger a sync.
# Remote sync problems never fail these requests; only invalid input does.
# =============================================================================

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status
from pydantic import BaseModel, Field

from app.dependencies import SynchronizerDep
from core.models.place import Place, PlaceCreate
from core.models.sync import FavoritesSnapshot, SyncState
from core.services.favorites_synchronizer import FavoritesSynchronizer

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class FavoritesResponse(BaseModel):
    """Current favorite set and sync status."""
    places: list[Place]
    total: int
    state: SyncState
    version: int
    owner_id: str | None = None
    last_synced_at: datetime | None = None
    pending_remote_writes: int = Field(default=0, description="Remote writes not finished yet")

    model_config = {
        "json_schema_extra": {
            "example": {
                "places": [
                    {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "name": "Austin",
                        "latitude": 30.2672,
                        "longitude": -97.7431,
                    }
                ],
                "total": 1,
                "state": "ready_merged",
                "version": 5,
                "owner_id": "3f1c...",
                "last_synced_at": "2025-09-08T10:30:00Z",
                "pending_remote_writes": 0,
            }
        }
    }


def _to_response(snapshot: FavoritesSnapshot, synchronizer: FavoritesSynchronizer) -> FavoritesResponse:
    return FavoritesResponse(
        places=list(snapshot.places),
        total=len(snapshot.places),
        state=snapshot.state,
        version=snapshot.version,
        owner_id=snapshot.owner_id,
        last_synced_at=snapshot.last_synced_at,
        pending_remote_writes=synchronizer.write_queue.pending,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=FavoritesResponse)
async def list_favorites(synchronizer: SynchronizerDep):
    """
    List favorites.

    Answers from memory immediately, even while the remote sync is running.
    """
    return _to_response(synchronizer.snapshot, synchronizer)


@router.post("", response_model=Place, status_code=status.HTTP_201_CREATED)
async def add_favorite(request: PlaceCreate, synchronizer: SynchronizerDep):
    """
    Add a favorite.

    Saved locally before responding; pushed to the remote store in the
    background. Out-of-range coordinates or a blank name return 400.
    """
    return await synchronizer.create(
        name=request.name,
        latitude=request.latitude,
        longitude=request.longitude,
    )


@router.delete("/{place_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    place_id: Annotated[UUID, Path(description="Favorite UUID")],
    synchronizer: SynchronizerDep,
):
    """
    Remove a favorite. Removing an unknown id succeeds and changes nothing.

    If the removed favorite was selected, the selection falls back to the
    device location.
    """
    await synchronizer.remove(place_id)


@router.post("/sync", response_model=FavoritesResponse)
async def sync_favorites(synchronizer: SynchronizerDep):
    """
    Re-run the remote sync now.

    Returns the merged set, or the local set if the remote is unreachable.
    """
    snapshot = await synchronizer.sync()
    return _to_response(snapshot, synchronizer)
