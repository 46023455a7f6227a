"""
Notifications module.

Usage:
    from app.features.notifications import NotificationService

    service = NotificationService(db, hub)
    await service.create_and_send(
        athlete_id, NotificationType.PLAN_ASSIGNED, "New plan", "...", plan_id=plan.id
    )
"""

from .models import Notification
from .schemas import NotificationResponse, NotificationList, UnreadCount
from .repository import NotificationRepository
from .service import NotificationService, NEW_NOTIFICATION_EVENT

__all__ = [
    "Notification",
    "NotificationResponse",
    "NotificationList",
    "UnreadCount",
    "NotificationRepository",
    "NotificationService",
    "NEW_NOTIFICATION_EVENT",
]
