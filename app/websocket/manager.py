# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Tracks WebSocket clients watching the favorites feed and fans events out
# to them.
#
# Synchronizer and selection listeners run synchronously inside the core's
# single-writer context, so they only enqueue events with publish(). A
# background task started by the app lifespan (run_publisher) drains the
# queue and does the actual sends.
#
# Usage:
#   manager = ConnectionManager()
#   await manager.connect(websocket)
#   manager.publish({"type": "favorites_changed", ...})
#   manager.disconnect(websocket)
# =============================================================================

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Fan-out of favorites/selection events to connected clients.

    One instance per application, stored on app.state.
    """

    def __init__(self, max_queued_events: int = 1000):
        self.connections: set[WebSocket] = set()
        self._outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_queued_events)

    async def connect(self, websocket: WebSocket) -> None:
        """
        Accept a new WebSocket connection and track it.

        Args:
            websocket: The WebSocket connection
        """
        await websocket.accept()
        self.connections.add(websocket)
        logger.info(f"WebSocket connected. Total connections: {len(self.connections)}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection from tracking."""
        self.connections.discard(websocket)
        logger.info(f"WebSocket disconnected. Total connections: {len(self.connections)}")

    def publish(self, message: dict[str, Any]) -> None:
        """
        Queue an event for broadcast. Safe to call from synchronous listeners.

        Events are dropped (with a warning) if the queue is full.
        """
        try:
            self._outbox.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"WebSocket outbox full, dropping {message.get('type')} event")

    async def run_publisher(self) -> None:
        """Broadcast queued events until cancelled."""
        logger.info("Starting WebSocket publisher")
        try:
            while True:
                message = await self._outbox.get()
                await self.broadcast(message)
        except asyncio.CancelledError:
            logger.info("WebSocket publisher cancelled")
            raise

    async def broadcast(self, message: dict[str, Any]) -> int:
        """
        Send a message to every connected client.

        Args:
            message: The message dict to send (will be JSON encoded)

        Returns:
            int: Number of clients the message was sent to
        """
        if not self.connections:
            logger.debug(f"No connections, skipping {message.get('type')} broadcast")
            return 0

        dead_connections: set[WebSocket] = set()
        sent_count = 0

        for websocket in list(self.connections):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead_connections.add(websocket)

        # Clean up any dead connections
        self.connections -= dead_connections
        if dead_connections:
            logger.info(f"Cleaned up {len(dead_connections)} dead connections")

        logger.debug(f"Broadcast type={message.get('type')} to {sent_count} clients")
        return sent_count

    def get_connection_count(self) -> int:
        return len(self.connections)
