"""
Notification schemas.
"""

from datetime import datetime
from typing import Optional

from app.shared.schemas import CamelModel


class NotificationResponse(CamelModel):
    id: int
    type: str
    title: str
    message: str
    from_user_id: Optional[str] = None
    plan_id: Optional[str] = None
    session_id: Optional[str] = None
    activity_id: Optional[str] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationList(CamelModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int


class UnreadCount(CamelModel):
    count: int
