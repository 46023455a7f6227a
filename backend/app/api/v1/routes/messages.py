"""
Messaging endpoints.

Endpoints:
- GET  /messages/conversations        - One entry per counterpart
- GET  /messages/unread/count         - Total unread messages
- GET  /messages/{user_id}            - Conversation page (marks incoming read)
- POST /messages                      - Send a message
- POST /messages/{sender_id}/read     - Mark a sender's messages read
- POST /messages/{message_id}/reactions - Toggle own reaction on a message
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.dates import to_naive_utc
from app.features.auth import get_current_user
from app.features.messages import (
    ConversationList,
    ConversationPage,
    MessageCreate,
    MessageResponse,
    MessageService,
    ReactionRequest,
    ReadReceipt,
)
from app.features.notifications import UnreadCount
from app.features.realtime import ConnectionHub, get_hub
from app.features.users import User, UserSummary

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/conversations", response_model=ConversationList)
async def list_conversations(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    conversations = await MessageService(db).list_conversations(user)
    return ConversationList(conversations=conversations)


@router.get("/unread/count", response_model=UnreadCount)
async def unread_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return UnreadCount(count=await MessageService(db).unread_count(user))


@router.get("/{user_id}", response_model=ConversationPage)
async def get_conversation(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    before: Optional[datetime] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """
    Conversation with another user, oldest first.

    Unread messages from that user are marked read.
    """
    other, messages = await MessageService(db, hub).get_conversation(
        user,
        user_id,
        limit=limit,
        before=to_naive_utc(before) if before else None,
    )
    return ConversationPage(messages=messages, user=UserSummary.model_validate(other))


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    data: MessageCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    return await MessageService(db, hub).send(user, data.receiver_id, data.content, data.activity_id)


@router.post("/{sender_id}/read", response_model=ReadReceipt)
async def mark_read(
    sender_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    return await MessageService(db, hub).mark_read(sender_id, user)


@router.post("/{message_id}/reactions", response_model=MessageResponse)
async def react(
    message_id: str,
    data: ReactionRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Same emoji again removes the reaction; another emoji replaces it."""
    return await MessageService(db, hub).react(user, message_id, data.emoji)
