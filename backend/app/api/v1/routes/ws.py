"""
WebSocket endpoint.

- /ws?token=<session token>  - Live messaging, typing and notifications
"""

from fastapi import APIRouter, Depends, WebSocket
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.realtime import ConnectionHub, get_hub, serve_socket

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    await serve_socket(websocket, db, hub)
