"""
Real-time dependencies.

The hub lives on app.state so every request and socket of one process
shares the same presence registry.
"""

from starlette.requests import HTTPConnection

from .hub import ConnectionHub


def get_hub(connection: HTTPConnection) -> ConnectionHub:
    """Works for both HTTP requests and WebSocket connections."""
    return connection.app.state.hub
