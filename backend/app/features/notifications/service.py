"""
Notification Service.

Creates notifications in DB and pushes them live over the WebSocket hub.
Single point of notification creation for the entire app.
"""

import logging
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import NotificationType
from app.shared.dates import utcnow
from app.shared.errors import NotFound
from .models import Notification
from .repository import NotificationRepository
from .schemas import NotificationResponse

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "notification:new"


class NotificationService:
    """
    Unified notification service.

    Creates notification in database and, when the user is connected,
    pushes it as a notification:new event.
    """

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.hub = hub
        self.notifications = NotificationRepository(db)

    async def create_and_send(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        **refs: Optional[str],
    ) -> Notification:
        """
        Create notification in DB and push it live.

        Flushes but does not commit; the caller's transaction owns it.

        Args:
            user_id: Recipient
            notification_type: Type of notification
            title: Short title
            message: Body text
            **refs: from_user_id, plan_id, session_id, activity_id

        Returns:
            Created Notification object
        """
        notification = await self.create(user_id, notification_type, title, message, **refs)
        await self.push(notification)
        return notification

    async def create(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        **refs: Optional[str],
    ) -> Notification:
        """Persist only; pair with push() once the enclosing savepoint is released."""
        notification = await self.notifications.create(
            user_id=user_id,
            type=notification_type.value,
            title=title,
            message=message,
            read=False,
            created_at=utcnow(),
            **refs,
        )
        logger.debug(f"Created notification {notification_type.value} for user {user_id}")
        return notification

    async def push(self, notification: Notification) -> None:
        """Push to the user's room (errors are logged, never raised)."""
        if self.hub is None:
            return
        try:
            payload = NotificationResponse.model_validate(notification).model_dump(
                mode="json", by_alias=True
            )
            await self.hub.emit_to_user(notification.user_id, NEW_NOTIFICATION_EVENT, payload)
        except Exception as e:
            logger.error(f"Failed to push notification {notification.id}: {e}")

    # === Inbox operations ===

    async def inbox(self, user_id: str, limit: int, offset: int, unread_only: bool):
        items, total = await self.notifications.list_for_user(user_id, limit, offset, unread_only)
        unread = await self.notifications.count_unread(user_id)
        return items, total, unread

    async def unread_count(self, user_id: str) -> int:
        return await self.notifications.count_unread(user_id)

    async def _get_own(self, user_id: str, notification_id: int) -> Notification:
        notification = await self.notifications.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFound("Notification not found")
        return notification

    async def mark_read(self, user_id: str, notification_id: int) -> Notification:
        notification = await self._get_own(user_id, notification_id)
        if not notification.read:
            await self.notifications.update(notification, read=True, read_at=utcnow())
            await self.db.commit()
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        count = await self.notifications.mark_all_read(user_id, utcnow())
        await self.db.commit()
        return count

    async def delete(self, user_id: str, notification_id: int) -> None:
        notification = await self._get_own(user_id, notification_id)
        await self.notifications.delete(notification)
        await self.db.commit()
