# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for live favorites updates.
#
# Connect: ws://host/ws/favorites
#
# Events:
#   - {"type": "connected", "version": 3, ...}          (current snapshot)
#   - {"type": "favorites_changed", "version": 4, ...}
#   - {"type": "selection_changed", "place": {...} | null}
# =============================================================================

import logging

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from app.websocket.broadcast import favorites_event, selection_event

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/favorites")
async def favorites_websocket(websocket: WebSocket):
    """
    Stream favorites and selection changes to the client.

    On connect the client receives the current snapshot and selection, then
    every subsequent change. Sending "ping" gets "pong" back.
    """
    manager = websocket.app.state.websocket_manager
    services = websocket.app.state.services

    await manager.connect(websocket)

    try:
        # Initial state, so the client never waits for the first change
        welcome = favorites_event(services.synchronizer.snapshot)
        welcome["type"] = "connected"
        await websocket.send_json(welcome)
        await websocket.send_json(selection_event(services.selection.selected))

        while True:
            try:
                data = await websocket.receive_text()

                if data == "ping":
                    await websocket.send_text("pong")
                else:
                    logger.debug(f"WebSocket received: {data[:100]}")

            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.warning(f"WebSocket receive error: {e}")
                break

    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected from favorites feed")
    finally:
        manager.disconnect(websocket)


@router.get("/ws/status")
async def websocket_status(request: Request):
    """
    Get WebSocket connection statistics.

    Returns:
        dict: Connection count
    """
    return {
        "total_connections": request.app.state.websocket_manager.get_connection_count(),
    }
