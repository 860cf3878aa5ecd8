# =============================================================================
# app/websocket/broadcast.py - Event Payloads
# =============================================================================
# Turns core change notifications into WebSocket messages.
#
# Events:
#   - favorites_changed: The favorite set or its sync state changed
#   - selection_changed: The active favorite changed (place is null when the
#     device location is in use)
# =============================================================================

from typing import Any

from core.models.place import Place
from core.models.sync import FavoritesSnapshot

FAVORITES_CHANGED = "favorites_changed"
SELECTION_CHANGED = "selection_changed"


def favorites_event(snapshot: FavoritesSnapshot) -> dict[str, Any]:
    """
    Build a favorites_changed event.

    Example:
        {
            "type": "favorites_changed",
            "version": 7,
            "state": "ready_merged",
            "places": [{"id": "...", "name": "Austin", ...}]
        }
    """
    return {
        "type": FAVORITES_CHANGED,
        **snapshot.model_dump(mode="json", include={"version", "state", "places", "last_synced_at"}),
    }


def selection_event(place: Place | None) -> dict[str, Any]:
    """Build a selection_changed event."""
    return {
        "type": SELECTION_CHANGED,
        "place": place.model_dump(mode="json") if place is not None else None,
    }
