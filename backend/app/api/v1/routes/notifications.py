"""
Notification endpoints.

Endpoints:
- GET    /notifications                  - Inbox page
- GET    /notifications/unread-count     - Unread counter
- POST   /notifications/mark-all-read    - Mark everything read
- PATCH  /notifications/{id}/read        - Mark one read
- DELETE /notifications/{id}             - Delete one
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.schemas import MessageResponse
from app.features.auth import get_current_user
from app.features.notifications import (
    NotificationList,
    NotificationResponse,
    NotificationService,
    UnreadCount,
)
from app.features.users import User

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList)
async def get_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False, alias="unreadOnly"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Get notifications for the current user, newest first.

    Args:
        limit: Maximum number of notifications to return
        offset: Offset for pagination
        unread_only: If True, return only unread notifications
    """
    items, total, unread = await NotificationService(db).inbox(user.id, limit, offset, unread_only)
    return NotificationList(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        total=total,
        unread_count=unread,
    )


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return UnreadCount(count=await NotificationService(db).unread_count(user.id))


@router.post("/mark-all-read", response_model=UnreadCount)
async def mark_all_read(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Returns the number of notifications that were marked."""
    return UnreadCount(count=await NotificationService(db).mark_all_read(user.id))


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    notification = await NotificationService(db).mark_read(user.id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await NotificationService(db).delete(user.id, notification_id)
    return MessageResponse(message="Notification deleted")
