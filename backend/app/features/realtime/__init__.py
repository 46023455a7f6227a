"""
Real-time channel.

Usage:
    from app.features.realtime import ConnectionHub

    hub = ConnectionHub()          # in-memory presence
    app.state.hub = hub
    await hub.emit_to_user(user_id, "notification:new", payload)
"""

from .presence import PresenceRegistry, InMemoryPresenceRegistry
from .hub import ConnectionHub
from .socket import serve_socket, extract_token, WS_UNAUTHENTICATED
from .dependencies import get_hub

__all__ = [
    "PresenceRegistry",
    "InMemoryPresenceRegistry",
    "ConnectionHub",
    "serve_socket",
    "extract_token",
    "WS_UNAUTHENTICATED",
    "get_hub",
]
