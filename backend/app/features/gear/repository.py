"""
Gear repository.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from app.features.activities.models import Activity
from .models import ActivityGear, Gear


@dataclass
class GearUsage:
    distance: float = 0.0  # km
    duration: int = 0  # seconds
    activities: int = 0


class GearRepository(BaseRepository[Gear]):
    """Repository for Gear and its activity links."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Gear)

    async def for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        gear_type: Optional[str] = None,
    ) -> list[Gear]:
        conditions = [Gear.user_id == user_id]
        if status:
            conditions.append(Gear.status == status)
        if gear_type:
            conditions.append(Gear.gear_type == gear_type)
        return await self.list(*conditions, order_by=Gear.created_at)

    async def usage(self, gear_ids: list[str]) -> dict[str, GearUsage]:
        """
        Summed activity metrics per gear.

        Inner join: links to activities that no longer exist never count.
        """
        if not gear_ids:
            return {}
        result = await self.db.execute(
            select(
                ActivityGear.gear_id,
                func.coalesce(func.sum(Activity.distance), 0.0),
                func.coalesce(func.sum(Activity.duration), 0),
                func.count(Activity.id),
            )
            .join(Activity, Activity.id == ActivityGear.activity_id)
            .where(ActivityGear.gear_id.in_(gear_ids))
            .group_by(ActivityGear.gear_id)
        )
        return {
            gear_id: GearUsage(round(float(distance), 2), int(duration), int(count))
            for gear_id, distance, duration, count in result.all()
        }

    async def recent_activities(self, gear_id: str, limit: int) -> list[Activity]:
        result = await self.db.execute(
            select(Activity)
            .join(ActivityGear, ActivityGear.activity_id == Activity.id)
            .where(ActivityGear.gear_id == gear_id)
            .order_by(Activity.date.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def link(self, activity_id: str, gear_id: str) -> ActivityGear:
        link = ActivityGear(activity_id=activity_id, gear_id=gear_id)
        self.db.add(link)
        await self.db.flush()
        return link

    async def unlink(self, activity_id: str, gear_id: str) -> int:
        result = await self.db.execute(
            delete(ActivityGear).where(
                ActivityGear.activity_id == activity_id,
                ActivityGear.gear_id == gear_id,
            )
        )
        return result.rowcount or 0

    async def unlink_all(self, gear_id: str) -> None:
        await self.db.execute(delete(ActivityGear).where(ActivityGear.gear_id == gear_id))

    async def count_for_user(self, user_id: str) -> int:
        return await self.count_where(Gear.user_id == user_id)
