"""
Message repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, case, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Message


class MessageRepository(BaseRepository[Message]):
    """Repository for Message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Message)

    @staticmethod
    def _between(user_a: str, user_b: str):
        return or_(
            and_(Message.sender_id == user_a, Message.receiver_id == user_b),
            and_(Message.sender_id == user_b, Message.receiver_id == user_a),
        )

    async def conversation(
        self,
        user_id: str,
        other_id: str,
        limit: int = 50,
        before: Optional[datetime] = None,
    ) -> list[Message]:
        """
        Page of a conversation in chronological order.

        Args:
            limit: Maximum messages
            before: Only messages sent strictly before this time

        Returns:
            Oldest-first list of the newest `limit` matching messages
        """
        conditions = [self._between(user_id, other_id)]
        if before is not None:
            conditions.append(Message.sent_at < before)
        newest_first = await self.list(
            *conditions,
            order_by=desc(Message.sent_at),
            limit=limit,
        )
        return list(reversed(newest_first))

    async def mark_read(self, sender_id: str, receiver_id: str, read_at: datetime) -> int:
        """
        Set one read_at on every unread message sender -> receiver.

        The reverse direction and already-read messages are untouched.

        Returns:
            Number of messages marked
        """
        return await self.update_where(
            Message.sender_id == sender_id,
            Message.receiver_id == receiver_id,
            Message.read_at.is_(None),
            read_at=read_at,
        )

    async def counterparts(self, user_id: str) -> list[tuple[str, datetime]]:
        """
        Everyone this user has exchanged messages with.

        Returns:
            (counterpart_id, last_sent_at) pairs, most recent first
        """
        other = case(
            (Message.sender_id == user_id, Message.receiver_id),
            else_=Message.sender_id,
        ).label("other_id")
        last_at = func.max(Message.sent_at).label("last_at")

        result = await self.db.execute(
            select(other, last_at)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .group_by(other)
            .order_by(desc(last_at))
        )
        return [(row.other_id, row.last_at) for row in result.all()]

    async def last_between(self, user_id: str, other_id: str) -> Message | None:
        result = await self.db.execute(
            select(Message)
            .where(self._between(user_id, other_id))
            .order_by(desc(Message.sent_at))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def unread_from(self, sender_id: str, receiver_id: str) -> int:
        return await self.count_where(
            Message.sender_id == sender_id,
            Message.receiver_id == receiver_id,
            Message.read_at.is_(None),
        )

    async def unread_total(self, receiver_id: str) -> int:
        return await self.count_where(
            Message.receiver_id == receiver_id,
            Message.read_at.is_(None),
        )
