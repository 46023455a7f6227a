"""
WebSocket session handling.

One coroutine per connection:

1. Authenticate before accepting (token from ?token= or a Bearer
   Authorization header); failure closes with 4401.
2. Join the user's room in the hub.
3. Dispatch client frames {"event", "data"} until disconnect.

Domain errors inside a handler are sent back as an "error" event and
the connection stays open.
"""

import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError as SchemaError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import AppError, Unauthenticated
from app.features.auth.security import verify_session
from app.features.access.policy import AccessPolicy
from app.features.messages.schemas import MessageCreate, MessageRead, TypingEvent
from app.features.messages.service import MessageService
from app.features.users.models import User
from app.features.users.repository import UserRepository
from .hub import ConnectionHub

logger = logging.getLogger(__name__)

WS_UNAUTHENTICATED = 4401

ERROR_EVENT = "error"
TYPING_START = "typing:start"
TYPING_STOP = "typing:stop"


def extract_token(websocket: WebSocket) -> Optional[str]:
    """Session token from the query string, else from the Authorization header."""
    token = websocket.query_params.get("token")
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def authenticate(websocket: WebSocket, db: AsyncSession) -> Optional[User]:
    try:
        claims = verify_session(extract_token(websocket))
    except Unauthenticated:
        return None
    return await UserRepository(db).get_by_id(claims.user_id)


class SocketSession:
    """Event dispatch for one authenticated connection."""

    def __init__(self, websocket: WebSocket, user_id: str, db: AsyncSession, hub: ConnectionHub):
        self.websocket = websocket
        self.user_id = user_id
        self.db = db
        self.hub = hub
        self.handlers = {
            "message:send": self.on_message_send,
            "message:read": self.on_message_read,
            TYPING_START: self.on_typing,
            TYPING_STOP: self.on_typing,
        }

    async def send_error(self, message: str, **extra) -> None:
        await self.websocket.send_json({"event": ERROR_EVENT, "data": {"message": message, **extra}})

    async def dispatch(self, frame) -> None:
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await self.send_error("Malformed frame")
            return

        event = frame["event"]
        handler = self.handlers.get(event)
        if handler is None:
            await self.send_error("Unknown event", event=event)
            return

        # Relationships may have changed since the last frame
        self.db.expire_all()
        user = await self.db.get(User, self.user_id)
        if user is None:
            await self.db.rollback()
            await self.send_error("Not authenticated", event=event)
            return

        data = frame.get("data") or {}
        try:
            await handler(event, user, data)
            # No transaction stays open while the socket idles
            await self.db.commit()
        except AppError as e:
            await self.db.rollback()
            await self.send_error(e.message, event=event, **({"details": e.details} if e.details else {}))
        except SchemaError as e:
            await self.db.rollback()
            await self.send_error("Validation error", event=event, details=str(e))
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"Socket handler {event} failed for user {self.user_id}: {e}")
            await self.send_error("Internal server error", event=event)

    async def on_message_send(self, event: str, user: User, data: dict) -> None:
        request = MessageCreate.model_validate(data)
        await MessageService(self.db, self.hub).send(
            user, request.receiver_id, request.content, request.activity_id
        )

    async def on_message_read(self, event: str, user: User, data: dict) -> None:
        request = MessageRead.model_validate(data)
        await MessageService(self.db, self.hub).mark_read(request.sender_id, user)

    async def on_typing(self, event: str, user: User, data: dict) -> None:
        request = TypingEvent.model_validate(data)
        await AccessPolicy(self.db).ensure_can_message(user.id, request.receiver_id)
        await self.hub.emit_to_user(request.receiver_id, event, {"userId": user.id})


async def serve_socket(websocket: WebSocket, db: AsyncSession, hub: ConnectionHub) -> None:
    """Run one WebSocket connection to completion."""
    user = await authenticate(websocket, db)
    if user is None:
        await websocket.close(code=WS_UNAUTHENTICATED)
        return

    user_id = user.id
    await db.commit()

    await websocket.accept()
    connection_id = await hub.register(user_id, websocket)
    session = SocketSession(websocket, user_id, db, hub)
    try:
        while True:
            try:
                frame = await websocket.receive_json()
            except (ValueError, KeyError, TypeError):
                # Binary frames carry no "text" payload
                await session.send_error("Malformed frame")
                continue
            await session.dispatch(frame)
    except WebSocketDisconnect:
        pass
    finally:
        await hub.unregister(user_id, connection_id)
