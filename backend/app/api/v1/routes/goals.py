"""
Goal endpoints.

Endpoints:
- GET    /goals                      - Own goals (ACTIVE by default)
- GET    /goals/stats/historical     - Monthly and weekly series
- POST   /goals                      - Create goal
- PUT    /goals/{goal_id}            - Update goal
- DELETE /goals/{goal_id}            - Delete goal
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.constants import GoalStatus
from app.shared.schemas import MessageResponse
from app.features.auth import get_current_user
from app.features.goals import GoalService
from app.features.goals.schemas import (
    GoalCreate,
    GoalEnvelope,
    GoalList,
    GoalUpdate,
    HistoricalStats,
)
from app.features.goals.service import to_response
from app.features.realtime import ConnectionHub, get_hub
from app.features.users import User

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.get("", response_model=GoalList)
async def list_goals(
    status: Optional[GoalStatus] = Query(None),
    include_completed: bool = Query(False, alias="includeCompleted"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    goals = await GoalService(db, hub).list_goals(
        user,
        status=status.value if status else None,
        include_completed=include_completed,
    )
    return GoalList(goals=goals)


@router.get("/stats/historical", response_model=HistoricalStats)
async def historical_stats(
    months: int = Query(6, ge=1, le=24),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return await GoalService(db).historical(user, months)


@router.post("", response_model=GoalEnvelope, status_code=201)
async def create_goal(
    data: GoalCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    goal = await GoalService(db).create(user, data)
    return GoalEnvelope(goal=to_response(goal))


@router.put("/{goal_id}", response_model=GoalEnvelope)
async def update_goal(
    goal_id: str,
    data: GoalUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    goal = await GoalService(db, hub).update(user, goal_id, data)
    return GoalEnvelope(goal=to_response(goal))


@router.delete("/{goal_id}", response_model=MessageResponse)
async def delete_goal(
    goal_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await GoalService(db).delete(user, goal_id)
    return MessageResponse(message="Goal deleted")
