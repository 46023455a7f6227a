"""
Messaging schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.shared.constants import MESSAGE_MAX_LENGTH
from app.shared.schemas import CamelModel
from app.features.users.schemas import UserSummary


class MessageCreate(CamelModel):
    receiver_id: str
    content: str = Field(default="", max_length=MESSAGE_MAX_LENGTH)
    activity_id: Optional[str] = None


class MessageRead(CamelModel):
    sender_id: str


class TypingEvent(CamelModel):
    receiver_id: str


class Reaction(CamelModel):
    user_id: str
    emoji: str


class ReactionRequest(CamelModel):
    emoji: str = Field(..., min_length=1, max_length=4)


class MessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    activity_id: Optional[str] = None
    sent_at: datetime
    read_at: Optional[datetime] = None
    reactions: list[Reaction] = Field(default_factory=list)
    sender: Optional[UserSummary] = None


class ConversationSummary(CamelModel):
    user: UserSummary
    last_message: MessageResponse
    unread_count: int


class ConversationList(CamelModel):
    conversations: list[ConversationSummary]


class ConversationPage(CamelModel):
    messages: list[MessageResponse]
    user: UserSummary


class ReadReceipt(CamelModel):
    """Payload of the message:read event."""

    read_by: str
    read_at: datetime
    count: int = 0


class ReactionUpdate(CamelModel):
    """Payload of the message:reaction event."""

    message_id: str
    reactions: list[Reaction]
