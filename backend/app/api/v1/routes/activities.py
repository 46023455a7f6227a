"""
Activity endpoints.

Endpoints:
- GET    /activities                 - List own (or a coached athlete's) activities
- GET    /activities/{id}            - Activity with decoded route
- POST   /activities                 - Log a manual activity
- PUT    /activities/{id}            - Update (owner)
- DELETE /activities/{id}            - Delete (owner)
- POST   /activities/{id}/feedback   - Coach feedback
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.dates import to_naive_utc
from app.shared.schemas import FeedbackRequest, MessageResponse
from app.features.activities import ActivityCreate, ActivityList, ActivityService, ActivityUpdate
from app.features.activities.schemas import (
    ActivityDetailEnvelope,
    ActivityEnvelope,
    ActivityResponse,
)
from app.features.auth import get_current_user, require_coach
from app.features.realtime import ConnectionHub, get_hub
from app.features.users import User

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("", response_model=ActivityList)
async def list_activities(
    user_id: Optional[str] = Query(None, alias="userId"),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    activity_type: Optional[str] = Query(None, alias="type"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    List activities, newest first.

    Without userId the caller's own; with userId only if the caller is
    that athlete's coach.
    """
    items, total = await ActivityService(db).list(
        user,
        user_id=user_id,
        date_from=to_naive_utc(date_from) if date_from else None,
        date_to=to_naive_utc(date_to) if date_to else None,
        activity_type=activity_type,
        limit=limit,
        offset=offset,
    )
    return ActivityList(
        activities=[ActivityResponse.model_validate(a) for a in items],
        total=total,
    )


@router.get("/{activity_id}", response_model=ActivityDetailEnvelope)
async def get_activity(
    activity_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return ActivityDetailEnvelope(activity=await ActivityService(db).get(user, activity_id))


@router.post("", response_model=ActivityEnvelope, status_code=201)
async def create_activity(
    data: ActivityCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    activity = await ActivityService(db, hub).create(user, data)
    return ActivityEnvelope(activity=ActivityResponse.model_validate(activity))


@router.put("/{activity_id}", response_model=ActivityEnvelope)
async def update_activity(
    activity_id: str,
    data: ActivityUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    activity = await ActivityService(db).update(user, activity_id, data)
    return ActivityEnvelope(activity=ActivityResponse.model_validate(activity))


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await ActivityService(db).delete(user, activity_id)
    return MessageResponse(message="Activity deleted")


@router.post("/{activity_id}/feedback", response_model=ActivityEnvelope)
async def add_feedback(
    activity_id: str,
    data: FeedbackRequest,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    activity = await ActivityService(db, hub).add_feedback(coach, activity_id, data.feedback)
    return ActivityEnvelope(activity=ActivityResponse.model_validate(activity))
