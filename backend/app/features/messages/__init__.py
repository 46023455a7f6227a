"""
Messaging channel.

Usage:
    from app.features.messages import MessageService

    service = MessageService(db, hub)
    await service.send(coach, athlete_id, "Great run!")
    await service.mark_read(coach.id, athlete)
"""

from .models import Message
from .schemas import (
    MessageCreate,
    MessageRead,
    TypingEvent,
    MessageResponse,
    Reaction,
    ReactionRequest,
    ReactionUpdate,
    ConversationSummary,
    ConversationList,
    ConversationPage,
    ReadReceipt,
)
from .repository import MessageRepository
from .service import MessageService, MESSAGE_SENT, MESSAGE_RECEIVED, MESSAGE_READ, MESSAGE_REACTION

__all__ = [
    "Message",
    "MessageCreate",
    "MessageRead",
    "TypingEvent",
    "MessageResponse",
    "Reaction",
    "ReactionRequest",
    "ReactionUpdate",
    "ConversationSummary",
    "ConversationList",
    "ConversationPage",
    "ReadReceipt",
    "MessageRepository",
    "MessageService",
    "MESSAGE_SENT",
    "MESSAGE_RECEIVED",
    "MESSAGE_READ",
    "MESSAGE_REACTION",
]
