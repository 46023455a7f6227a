"""
Notification repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Notification


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Notification)

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int]:
        """
        Page of a user's notifications, newest first.

        Returns:
            Tuple of (notifications, total matching)
        """
        conditions = [Notification.user_id == user_id]
        if unread_only:
            conditions.append(Notification.read.is_(False))

        items = await self.list(
            *conditions,
            order_by=Notification.created_at.desc(),
            limit=limit,
            offset=offset,
        )
        total = await self.count_where(*conditions)
        return items, total

    async def count_unread(self, user_id: str) -> int:
        return await self.count_where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        )

    async def mark_all_read(self, user_id: str, now) -> int:
        return await self.update_where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
            read=True,
            read_at=now,
        )
