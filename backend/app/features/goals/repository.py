"""
Goal repository.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import GoalStatus
from app.shared.repository import BaseRepository
from .models import Goal


class GoalRepository(BaseRepository[Goal]):
    """Repository for Goal operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Goal)

    async def for_user(self, user_id: str, status: Optional[str] = None) -> list[Goal]:
        """A user's goals, soonest deadline first; all statuses when status is None."""
        conditions = [Goal.user_id == user_id]
        if status:
            conditions.append(Goal.status == status)
        return await self.list(*conditions, order_by=Goal.end_date)

    async def active(self, user_id: str) -> list[Goal]:
        return await self.for_user(user_id, GoalStatus.ACTIVE.value)

    async def count_for_user(self, user_id: str) -> int:
        return await self.count_where(Goal.user_id == user_id)
