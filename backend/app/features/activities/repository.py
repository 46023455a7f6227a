"""
Activity repository.

Window aggregations (sum/count/avg) are done in SQL. Calendar series
load a column projection (points) and are bucketed in activities.stats.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Activity
from .stats import ActivityPoint


@dataclass
class ActivityTotals:
    """Aggregate of a set of activities."""

    distance: float = 0.0
    duration: int = 0
    elevation: int = 0
    workouts: int = 0
    avg_pace: Optional[float] = None
    avg_heart_rate: Optional[float] = None


class ActivityRepository(BaseRepository[Activity]):
    """Repository for Activity operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    def _user_filters(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        activity_type: Optional[str] = None,
    ) -> list:
        conditions = [Activity.user_id == user_id]
        if date_from is not None:
            conditions.append(Activity.date >= date_from)
        if date_to is not None:
            conditions.append(Activity.date <= date_to)
        if activity_type:
            conditions.append(Activity.activity_type == activity_type)
        return conditions

    async def list_for_user(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        activity_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Activity], int]:
        """
        Page of a user's activities, newest first.

        Returns:
            Tuple of (activities, total matching the filters)
        """
        conditions = self._user_filters(user_id, date_from, date_to, activity_type)
        items = await self.list(
            *conditions,
            order_by=Activity.date.desc(),
            limit=limit,
            offset=offset,
        )
        total = await self.count_where(*conditions)
        return items, total

    async def recent(self, user_id: str, limit: int = 10) -> list[Activity]:
        return await self.list(
            Activity.user_id == user_id,
            order_by=Activity.date.desc(),
            limit=limit,
        )

    async def count_for_user(self, user_id: str) -> int:
        return await self.count_where(Activity.user_id == user_id)

    async def has_strava_id(self, user_id: str, strava_id: int) -> bool:
        return await self.exists(user_id=user_id, strava_id=strava_id)

    async def delete_by_strava_id(self, user_id: str, strava_id: int) -> int:
        result = await self.db.execute(
            delete(Activity).where(
                Activity.user_id == user_id,
                Activity.strava_id == strava_id,
            )
        )
        return result.rowcount or 0

    async def last_activity_date(self, user_id: str) -> datetime | None:
        result = await self.db.execute(
            select(func.max(Activity.date)).where(Activity.user_id == user_id)
        )
        return result.scalar()

    async def last_synced_at(self, user_id: str) -> datetime | None:
        """Import time of the newest Strava activity."""
        result = await self.db.execute(
            select(func.max(Activity.created_at)).where(
                Activity.user_id == user_id,
                Activity.strava_id.is_not(None),
            )
        )
        return result.scalar()

    async def totals(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> ActivityTotals:
        """
        Aggregate a user's activities.

        Args:
            user_id: Owner
            since: Only activities on or after this timestamp
            until: Only activities strictly before this timestamp

        Returns:
            ActivityTotals (zeros when there is nothing to aggregate)
        """
        query = select(
            func.coalesce(func.sum(Activity.distance), 0.0),
            func.coalesce(func.sum(Activity.duration), 0),
            func.coalesce(func.sum(Activity.elevation_gain), 0),
            func.count(Activity.id),
            func.avg(Activity.avg_pace),
            func.avg(Activity.avg_heart_rate),
        ).where(Activity.user_id == user_id)
        if since is not None:
            query = query.where(Activity.date >= since)
        if until is not None:
            query = query.where(Activity.date < until)

        row = (await self.db.execute(query)).one()
        distance, duration, elevation, workouts, avg_pace, avg_hr = row
        return ActivityTotals(
            distance=round(float(distance), 2),
            duration=int(duration),
            elevation=int(elevation),
            workouts=int(workouts),
            avg_pace=round(float(avg_pace), 1) if avg_pace is not None else None,
            avg_heart_rate=round(float(avg_hr)) if avg_hr is not None else None,
        )

    async def points(self, user_id: str, since: datetime) -> list[ActivityPoint]:
        """Series columns of every activity on or after since, oldest first."""
        result = await self.db.execute(
            select(
                Activity.date,
                Activity.distance,
                Activity.duration,
                Activity.elevation_gain,
                Activity.avg_pace,
                Activity.avg_heart_rate,
            )
            .where(Activity.user_id == user_id, Activity.date >= since)
            .order_by(Activity.date)
        )
        return [ActivityPoint(*row) for row in result.all()]

    async def active_days(self, user_id: str, since: datetime) -> set[date]:
        result = await self.db.execute(
            select(Activity.date).where(Activity.user_id == user_id, Activity.date >= since)
        )
        return {value.date() for value in result.scalars().all()}

    async def linked_to_sessions(self, session_ids: list[str]) -> list[Activity]:
        if not session_ids:
            return []
        return await self.list(
            Activity.plan_session_id.in_(session_ids),
            order_by=Activity.date,
        )
