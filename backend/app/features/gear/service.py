"""
Gear Service.

Users track their equipment and tag activities with it. Gear is private
to its owner: someone else's gear (or activity) is simply NotFound.
Replacement alerts fire for active gear with a distance limit once
usage reaches GEAR_ALERT_PERCENT.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import GearStatus
from app.shared.dates import utcnow
from app.shared.errors import NotFound, ValidationError
from app.features.activities.repository import ActivityRepository
from app.features.activities.schemas import ActivityBrief
from app.features.users.models import User
from .models import Gear
from .repository import GearRepository, GearUsage
from .schemas import GearCreate, GearDetail, GearResponse, GearUpdate

logger = logging.getLogger(__name__)

GEAR_NOT_FOUND = "Gear not found"
GEAR_ALERT_PERCENT = 80
RECENT_ACTIVITIES = 20

# Fields an update may clear with an explicit null
NULLABLE_FIELDS = frozenset({
    "name", "max_distance", "purchase_date", "notes", "image_url",
})


def usage_percent(distance: float, max_distance: Optional[float]) -> Optional[int]:
    """Share of the distance limit used, capped at 100; None without a limit."""
    if not max_distance:
        return None
    return min(100, round(distance / max_distance * 100))


def to_response(gear: Gear, usage: Optional[GearUsage] = None) -> GearResponse:
    usage = usage or GearUsage()
    response = GearResponse.model_validate(gear)
    response.total_distance = usage.distance
    response.total_duration = usage.duration
    response.total_activities = usage.activities
    response.usage_percent = usage_percent(usage.distance, gear.max_distance)
    response.needs_replacement = bool(gear.max_distance) and usage.distance >= gear.max_distance
    return response


class GearService:
    """Gear CRUD, replacement alerts and activity tagging."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.gear = GearRepository(db)
        self.activities = ActivityRepository(db)

    async def _get_owned(self, user: User, gear_id: str) -> Gear:
        gear = await self.gear.get_by_id(gear_id)
        if gear is None or gear.user_id != user.id:
            raise NotFound(GEAR_NOT_FOUND)
        return gear

    async def _check_activity(self, user: User, activity_id: str) -> None:
        activity = await self.activities.get_by_id(activity_id)
        if activity is None or activity.user_id != user.id:
            raise NotFound("Activity not found")

    async def describe(self, gear: Gear) -> GearResponse:
        usage = await self.gear.usage([gear.id])
        return to_response(gear, usage.get(gear.id))

    async def list_gear(
        self,
        user: User,
        status: Optional[str] = None,
        gear_type: Optional[str] = None,
    ) -> list[GearResponse]:
        """Active gear first, then by distance covered."""
        items = await self.gear.for_user(user.id, status, gear_type)
        usage = await self.gear.usage([g.id for g in items])
        responses = [to_response(g, usage.get(g.id)) for g in items]
        responses.sort(key=lambda r: (r.status != GearStatus.ACTIVE.value, -r.total_distance))
        return responses

    async def alerts(self, user: User) -> list[GearResponse]:
        active = await self.list_gear(user, status=GearStatus.ACTIVE.value)
        return [
            g for g in active
            if g.usage_percent is not None and g.usage_percent >= GEAR_ALERT_PERCENT
        ]

    async def get(self, user: User, gear_id: str) -> GearDetail:
        gear = await self._get_owned(user, gear_id)
        recent = await self.gear.recent_activities(gear.id, RECENT_ACTIVITIES)
        return GearDetail(
            **(await self.describe(gear)).model_dump(),
            recent_activities=[ActivityBrief.model_validate(a) for a in recent],
        )

    async def create(self, user: User, data: GearCreate) -> Gear:
        gear = await self.gear.create(user_id=user.id, **data.model_dump())
        await self.db.commit()
        logger.info(f"User {user.id} added gear {gear.id} ({gear.brand} {gear.model})")
        return gear

    async def update(self, user: User, gear_id: str, data: GearUpdate) -> Gear:
        """
        Partial update. Retiring stamps retired_at; reactivating clears it.
        """
        gear = await self._get_owned(user, gear_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        new_status = changes.get("status")
        if new_status == GearStatus.RETIRED.value and gear.status != GearStatus.RETIRED.value:
            changes["retired_at"] = utcnow()
        elif new_status == GearStatus.ACTIVE.value:
            changes["retired_at"] = None

        await self.gear.update(gear, **changes)
        await self.db.commit()
        return gear

    async def delete(self, user: User, gear_id: str) -> None:
        gear = await self._get_owned(user, gear_id)
        await self.gear.unlink_all(gear.id)
        await self.gear.delete(gear)
        await self.db.commit()
        logger.info(f"User {user.id} deleted gear {gear_id}")

    async def assign(self, user: User, activity_id: str, gear_id: str) -> Gear:
        """
        Tag one of the caller's activities with one of their gear items.

        Raises:
            NotFound: Activity or gear unknown or not the caller's
            ValidationError: Already tagged
        """
        await self._check_activity(user, activity_id)
        gear = await self._get_owned(user, gear_id)

        try:
            async with self.db.begin_nested():
                await self.gear.link(activity_id, gear.id)
        except IntegrityError as e:
            raise ValidationError("Gear is already assigned to this activity") from e

        await self.db.commit()
        return gear

    async def unassign(self, user: User, activity_id: str, gear_id: str) -> Gear:
        """
        Raises:
            NotFound: Activity or gear not the caller's, or not tagged
        """
        await self._check_activity(user, activity_id)
        gear = await self._get_owned(user, gear_id)

        if not await self.gear.unlink(activity_id, gear.id):
            raise NotFound("Gear is not assigned to this activity")

        await self.db.commit()
        return gear
