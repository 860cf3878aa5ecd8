# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Provides real-time favorites updates.
#
# Usage:
#   manager = ConnectionManager()
#   synchronizer.subscribe(lambda snapshot: manager.publish(favorites_event(snapshot)))
#   selection.subscribe(lambda place: manager.publish(selection_event(place)))
# =============================================================================

from app.websocket.manager import ConnectionManager
from app.websocket.broadcast import (
    FAVORITES_CHANGED,
    SELECTION_CHANGED,
    favorites_event,
    selection_event,
)

__all__ = [
    "ConnectionManager",
    "FAVORITES_CHANGED",
    "SELECTION_CHANGED",
    "favorites_event",
    "selection_event",
]
