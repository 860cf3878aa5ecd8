# =============================================================================
# app/routers/selection.py - Active Favorite Selection
# =============================================================================
# Choose which favorite drives the weather screen, or fall back to the
# device location.
# =============================================================================

from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.dependencies import SelectionDep
from core.models.place import Place
from core.services.session_selection import SessionSelection

router = APIRouter()


class SelectionRequest(BaseModel):
    """Favorite to make active."""
    place_id: UUID = Field(..., examples=["550e8400-e29b-41d4-a716-446655440000"])


class SelectionResponse(BaseModel):
    """Current selection; place is null when the device location is used."""
    place: Place | None = None
    using_device_location: bool


def _to_response(selection: SessionSelection) -> SelectionResponse:
    return SelectionResponse(
        place=selection.selected,
        using_device_location=selection.is_using_device_location,
    )


@router.get("", response_model=SelectionResponse)
async def get_selection(selection: SelectionDep):
    """Get the active favorite."""
    return _to_response(selection)


@router.put("", response_model=SelectionResponse)
async def select_favorite(request: SelectionRequest, selection: SelectionDep):
    """
    Make a favorite the active location.

    Returns 404 if the id is not a current favorite.
    """
    selection.select_by_id(request.place_id)
    return _to_response(selection)


@router.delete("", response_model=SelectionResponse)
async def clear_selection(selection: SelectionDep):
    """Use the device location again."""
    selection.clear()
    return _to_response(selection)
