"""
Messaging Service.

Direct messages between a coach and their athlete. Every operation is
authorized by the access policy; a send is persisted first and then
mirrored live:

- message:sent      -> sender's room
- message:received  -> receiver's room
- message:read      -> original sender's room, {readBy, readAt}
- message:reaction  -> both rooms, {messageId, reactions}

Nothing is queued for offline users; the persisted row is what they
see on their next fetch.
"""

import logging
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import MESSAGE_MAX_LENGTH
from app.shared.dates import utcnow
from app.shared.errors import Forbidden, NotFound, ValidationError
from app.features.access.policy import AccessPolicy
from app.features.activities.repository import ActivityRepository
from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.features.users.schemas import UserSummary
from .models import Message
from .repository import MessageRepository
from .schemas import ConversationSummary, MessageResponse, ReactionUpdate, ReadReceipt

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

MESSAGE_SENT = "message:sent"
MESSAGE_RECEIVED = "message:received"
MESSAGE_READ = "message:read"
MESSAGE_REACTION = "message:reaction"


def serialize(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


class MessageService:
    """Send, read and list direct messages."""

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.hub = hub
        self.messages = MessageRepository(db)
        self.users = UserRepository(db)
        self.policy = AccessPolicy(db)

    async def _emit(self, user_id: str, event: str, data: dict) -> None:
        if self.hub is not None:
            await self.hub.emit_to_user(user_id, event, data)

    async def send(
        self,
        sender: User,
        receiver_id: str,
        content: str,
        activity_id: Optional[str] = None,
    ) -> MessageResponse:
        """
        Persist a message and push it to both rooms.

        Raises:
            NotFound: Unknown receiver or activity
            Forbidden: Sender and receiver are not coach and athlete
            ValidationError: Empty or oversized content
        """
        receiver = await self.users.get_by_id(receiver_id)
        if receiver is None:
            raise NotFound("User not found")
        await self.policy.ensure_can_message(sender.id, receiver.id)

        content = (content or "").strip()
        if not content and not activity_id:
            raise ValidationError("Message cannot be empty", {"content": ["Required"]})
        if len(content) > MESSAGE_MAX_LENGTH:
            raise ValidationError(
                "Message is too long",
                {"content": [f"At most {MESSAGE_MAX_LENGTH} characters"]},
            )

        if activity_id:
            activity = await ActivityRepository(self.db).get_by_id(activity_id)
            if activity is None or activity.user_id not in (sender.id, receiver.id):
                raise NotFound("Activity not found")

        message = await self.messages.create(
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=content,
            activity_id=activity_id,
            sent_at=utcnow(),
        )
        await self.db.commit()

        response = self.to_response(message, sender)
        payload = serialize(response)
        await self._emit(sender.id, MESSAGE_SENT, payload)
        await self._emit(receiver.id, MESSAGE_RECEIVED, payload)

        logger.debug(f"Message {message.id} {sender.id} -> {receiver.id}")
        return response

    @staticmethod
    def to_response(message: Message, sender: Optional[User] = None) -> MessageResponse:
        response = MessageResponse.model_validate(message)
        if sender is not None:
            response.sender = UserSummary.model_validate(sender)
        return response

    async def mark_read(self, sender_id: str, receiver: User) -> ReadReceipt:
        """
        Mark every unread message sender -> receiver as read.

        All messages of the batch share one read_at. The sender is told
        via message:read.
        """
        read_at = utcnow()
        count = await self.messages.mark_read(sender_id, receiver.id, read_at)
        await self.db.commit()

        receipt = ReadReceipt(read_by=receiver.id, read_at=read_at, count=count)
        if count:
            await self._emit(sender_id, MESSAGE_READ, serialize(receipt))
        return receipt

    async def react(self, user: User, message_id: str, emoji: str) -> MessageResponse:
        """
        Toggle the caller's reaction on a message.

        The same emoji again removes it; a different one replaces the
        caller's previous reaction. Both participants are told.

        Raises:
            NotFound: Unknown message
            Forbidden: Caller is neither sender nor receiver
        """
        message = await self.messages.get_by_id(message_id)
        if message is None:
            raise NotFound("Message not found")
        if user.id not in (message.sender_id, message.receiver_id):
            raise Forbidden("You are not part of this conversation")

        current = message.reactions or []
        previous = next((r for r in current if r["userId"] == user.id), None)
        reactions = [r for r in current if r["userId"] != user.id]
        if previous is None or previous["emoji"] != emoji:
            reactions.append({"userId": user.id, "emoji": emoji})

        # A new list: in-place changes to a JSON column are not tracked
        await self.messages.update(message, reactions=reactions)
        await self.db.commit()

        payload = serialize(ReactionUpdate(message_id=message.id, reactions=reactions))
        for participant in (message.sender_id, message.receiver_id):
            await self._emit(participant, MESSAGE_REACTION, payload)
        return self.to_response(message)

    async def list_conversations(self, user: User) -> list[ConversationSummary]:
        """
        One entry per counterpart, most recent conversation first.

        The unread count is a separate query per counterpart.
        """
        summaries = []
        for other_id, _ in await self.messages.counterparts(user.id):
            other = await self.users.get_by_id(other_id)
            last = await self.messages.last_between(user.id, other_id)
            if other is None or last is None:
                continue
            summaries.append(ConversationSummary(
                user=UserSummary.model_validate(other),
                last_message=self.to_response(last),
                unread_count=await self.messages.unread_from(other_id, user.id),
            ))
        return summaries

    async def get_conversation(
        self,
        user: User,
        other_id: str,
        limit: int = 50,
        before=None,
    ) -> tuple[User, list[MessageResponse]]:
        """
        Page of the conversation with other_id; marks incoming unread as read.

        Raises:
            NotFound: Unknown user
            Forbidden: Not coach and athlete
        """
        other = await self.users.get_by_id(other_id)
        if other is None:
            raise NotFound("User not found")
        await self.policy.ensure_can_message(user.id, other.id)

        messages = await self.messages.conversation(user.id, other.id, limit, before)
        await self.mark_read(other.id, user)

        by_id = {user.id: user, other.id: other}
        return other, [self.to_response(m, by_id.get(m.sender_id)) for m in messages]

    async def unread_count(self, user: User) -> int:
        return await self.messages.unread_total(user.id)
