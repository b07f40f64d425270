"""
Push notifications over WebSocket.

Clients connect to /ws and receive every broadcast (leaderboardUpdate,
analyticsUpdate, walletUpdates). A client can also join the room of a
single address to receive that wallet's walletUpdate messages.
"""

import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections and per-address rooms"""

    def __init__(self):
        self.active_connections: set[WebSocket] = set()
        self.rooms: dict[str, set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        for room in list(self.rooms):
            self.leave_room(websocket, room)

    def join_room(self, websocket: WebSocket, room: str):
        self.rooms.setdefault(room, set()).add(websocket)

    def leave_room(self, websocket: WebSocket, room: str):
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(websocket)
        if not members:
            del self.rooms[room]

    async def _send_many(self, connections: set[WebSocket], message: dict[str, Any]):
        if not connections:
            return

        message_json = json.dumps(message, default=str)
        disconnected = set()

        for connection in list(connections):
            try:
                await connection.send_text(message_json)
            except Exception as e:
                logger.debug(f"Dropping websocket after send failure: {e!r}")
                disconnected.add(connection)

        # Clean up disconnected clients
        for connection in disconnected:
            self.disconnect(connection)

    async def broadcast(self, event: str, data: Any):
        """Send message to all connected clients"""
        await self._send_many(self.active_connections, {"type": event, "data": data})

    async def send_to_room(self, room: str, event: str, data: Any):
        """Send message to the clients subscribed to one address"""
        await self._send_many(self.rooms.get(room, set()), {"type": event, "data": data})

    async def send_personal(self, websocket: WebSocket, event: str, data: Any = None):
        """Send message to specific client"""
        try:
            await websocket.send_text(json.dumps({"type": event, "data": data}, default=str))
        except Exception as e:
            logger.debug(f"Dropping websocket after send failure: {e!r}")
            self.disconnect(websocket)
