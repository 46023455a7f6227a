"""
Connection hub.

Owns the live WebSocket objects of this process and pushes events to a
user's room (all of that user's connections). Which users are online
is delegated to the injected PresenceRegistry.

Frames are JSON objects: {"event": name, "data": {...}}.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import WebSocket

from .presence import InMemoryPresenceRegistry, PresenceRegistry

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Per-process registry of sockets plus room fan-out."""

    def __init__(self, presence: Optional[PresenceRegistry] = None):
        self.presence = presence or InMemoryPresenceRegistry()
        self._sockets: dict[str, WebSocket] = {}

    async def register(self, user_id: str, websocket: WebSocket) -> str:
        """
        Add an accepted socket to the user's room.

        Returns:
            The new connection ID
        """
        connection_id = uuid.uuid4().hex
        self._sockets[connection_id] = websocket
        await self.presence.add(user_id, connection_id)
        logger.info(f"User {user_id} connected ({connection_id})")
        return connection_id

    async def unregister(self, user_id: str, connection_id: str) -> None:
        self._sockets.pop(connection_id, None)
        await self.presence.remove(user_id, connection_id)
        logger.info(f"User {user_id} disconnected ({connection_id})")

    async def is_online(self, user_id: str) -> bool:
        return await self.presence.is_online(user_id)

    async def emit_to_user(self, user_id: str, event: str, data: Any) -> int:
        """
        Push an event to every connection of a user.

        Offline users get nothing queued; the persisted rows are the
        offline delivery path.

        Returns:
            Number of connections the event was written to
        """
        delivered = 0
        for connection_id in await self.presence.connections(user_id):
            websocket = self._sockets.get(connection_id)
            if websocket is None:
                # Registered by another process
                continue
            try:
                await websocket.send_json({"event": event, "data": data})
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping dead connection {connection_id} of {user_id}: {e}")
                await self.unregister(user_id, connection_id)
        return delivered
