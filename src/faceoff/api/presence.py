"""Live count of connected viewers."""

from __future__ import annotations

import structlog
from fastapi import WebSocket, WebSocketDisconnect

logger = structlog.get_logger()


class PresenceTracker:
    """Track open WebSocket connections and broadcast the online count.

    The count lives in process memory and starts at zero on every start.
    """

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    @property
    def online_users(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        await self.broadcast()

    async def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        await self.broadcast()

    async def broadcast(self) -> None:
        """Send the current count to every connection, dropping dead ones."""
        payload = {"online_users": self.online_users}
        for websocket in list(self._connections):
            try:
                await websocket.send_json(payload)
            except (WebSocketDisconnect, RuntimeError):
                logger.debug("presence_drop")
                self._connections.discard(websocket)
