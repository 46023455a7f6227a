"""
Presence registry.

Knows which users currently hold at least one live connection. The
registry is an interface so a multi-instance deployment can back it
with a shared store; the in-memory implementation is per-process and
starts empty on every restart.
"""

import asyncio
from abc import ABC, abstractmethod


class PresenceRegistry(ABC):
    """user id -> set of live connection ids."""

    @abstractmethod
    async def add(self, user_id: str, connection_id: str) -> None:
        ...

    @abstractmethod
    async def remove(self, user_id: str, connection_id: str) -> None:
        ...

    @abstractmethod
    async def connections(self, user_id: str) -> set[str]:
        """Snapshot of a user's connection ids (empty if offline)."""

    async def is_online(self, user_id: str) -> bool:
        return bool(await self.connections(user_id))


class InMemoryPresenceRegistry(PresenceRegistry):
    """Single-process registry guarded by an asyncio lock."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._connections: dict[str, set[str]] = {}

    async def add(self, user_id: str, connection_id: str) -> None:
        async with self._lock:
            self._connections.setdefault(user_id, set()).add(connection_id)

    async def remove(self, user_id: str, connection_id: str) -> None:
        async with self._lock:
            ids = self._connections.get(user_id)
            if ids is None:
                return
            ids.discard(connection_id)
            if not ids:
                del self._connections[user_id]

    async def connections(self, user_id: str) -> set[str]:
        async with self._lock:
            return set(self._connections.get(user_id, ()))

    async def online_users(self) -> list[str]:
        async with self._lock:
            return list(self._connections)
