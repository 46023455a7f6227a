"""
Activity Service.

Manual activity CRUD and coach feedback. Visibility is decided by the
access policy: owner or owner's coach may read, only the owner writes.
"""

import logging
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import NotificationType
from app.shared.errors import Forbidden, NotFound
from app.shared.formatters import format_distance_km
from app.shared.polyline import decode_polyline
from app.features.access.policy import AccessPolicy, owns_resource
from app.features.notifications.service import NotificationService
from app.features.plans.repository import PlanRepository
from app.features.users.models import User
from .models import Activity
from .repository import ActivityRepository
from .schemas import ActivityCreate, ActivityDetail, ActivityUpdate

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

ACTIVITY_NOT_FOUND = "Activity not found"

# Fields an update may clear with an explicit null
NULLABLE_FIELDS = frozenset({
    "avg_pace", "avg_heart_rate", "max_heart_rate", "calories", "notes", "perceived_effort",
})


def compute_pace(duration_s: Optional[float], distance_km: Optional[float]) -> float:
    """Seconds per km; 0 when there is no distance."""
    if not distance_km or not duration_s:
        return 0.0
    return round(duration_s / distance_km, 1)


class ActivityService:
    """Activity operations on behalf of an authenticated user."""

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.hub = hub
        self.activities = ActivityRepository(db)
        self.plans = PlanRepository(db)
        self.policy = AccessPolicy(db)
        self.notifier = NotificationService(db, hub)

    async def list(
        self,
        actor: User,
        user_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        activity_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Activity], int]:
        """
        List the caller's activities, or an athlete's if the caller coaches them.

        Raises:
            Forbidden: Caller may not see that user's activities
        """
        target = user_id or actor.id
        await self.policy.ensure_can_act_on(
            actor, target, "You do not have access to these activities"
        )
        return await self.activities.list_for_user(
            target, date_from, date_to, activity_type, limit, offset
        )

    async def _get_visible(self, actor: User, activity_id: str) -> Activity:
        activity = await self.activities.get_by_id(activity_id)
        if activity is None:
            raise NotFound(ACTIVITY_NOT_FOUND)
        await self.policy.ensure_visible(actor, activity.user_id, ACTIVITY_NOT_FOUND)
        return activity

    async def _get_owned(self, actor: User, activity_id: str) -> Activity:
        activity = await self._get_visible(actor, activity_id)
        if not owns_resource(actor.id, activity.user_id):
            raise Forbidden("Only the owner can modify this activity")
        return activity

    async def get(self, actor: User, activity_id: str) -> ActivityDetail:
        """Activity with the route decoded from its polyline."""
        activity = await self._get_visible(actor, activity_id)
        detail = ActivityDetail.model_validate(activity)
        try:
            detail.route = decode_polyline(activity.map_polyline)
        except ValueError:
            logger.warning(f"Activity {activity.id} has a malformed polyline")
        return detail

    async def create(self, actor: User, data: ActivityCreate) -> Activity:
        """
        Log a manual activity.

        A given plan_session_id must belong to one of the caller's plans;
        that session is marked completed.
        The caller's active goals are re-measured.

        Raises:
            NotFound: Plan session unknown or not the caller's
        """
        values = data.model_dump()
        values["elevation_gain"] = round(values["elevation_gain"])
        if not values.get("avg_pace"):
            values["avg_pace"] = compute_pace(data.duration, data.distance)

        session = None
        if data.plan_session_id:
            session = await self.plans.get_session(data.plan_session_id)
            if session is None or session.plan.athlete_id != actor.id:
                raise NotFound("Plan session not found")

        activity = await self.activities.create(user_id=actor.id, **values)

        if session is not None and await self.plans.complete_session(session.id):
            await self._notify_session_completed(actor, session, activity)

        # Imported here: goals depends on the activities package
        from app.features.goals.service import GoalService

        await GoalService(self.db, self.hub).refresh_progress(actor.id)
        await self.db.commit()
        logger.info(f"User {actor.id} logged activity {activity.id} ({activity.distance} km)")
        return activity

    async def _notify_session_completed(self, athlete: User, session, activity: Activity) -> None:
        await self.notifier.create_and_send(
            session.plan.coach_id,
            NotificationType.SESSION_COMPLETED,
            "Session completed",
            f"{athlete.name} completed \"{session.title}\" "
            f"({format_distance_km(activity.distance)})",
            from_user_id=athlete.id,
            plan_id=session.plan_id,
            session_id=session.id,
            activity_id=activity.id,
        )

    async def update(self, actor: User, activity_id: str, data: ActivityUpdate) -> Activity:
        activity = await self._get_owned(actor, activity_id)

        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if "elevation_gain" in changes:
            changes["elevation_gain"] = round(changes["elevation_gain"])
        if ("distance" in changes or "duration" in changes) and "avg_pace" not in changes:
            changes["avg_pace"] = compute_pace(
                changes.get("duration", activity.duration),
                changes.get("distance", activity.distance),
            )

        await self.activities.update(activity, **changes)
        await self.db.commit()
        return activity

    async def delete(self, actor: User, activity_id: str) -> None:
        activity = await self._get_owned(actor, activity_id)
        await self.activities.delete(activity)
        await self.db.commit()
        logger.info(f"User {actor.id} deleted activity {activity_id}")

    async def add_feedback(self, coach: User, activity_id: str, feedback: str) -> Activity:
        """
        Coach comment on an athlete's activity.

        Raises:
            NotFound: Unknown activity
            Forbidden: Caller is not the owner's coach
        """
        activity = await self.activities.get_by_id(activity_id)
        if activity is None:
            raise NotFound(ACTIVITY_NOT_FOUND)
        await self.policy.ensure_coach_of(coach, activity.user_id)

        await self.activities.update(activity, coach_feedback=feedback)
        await self.notifier.create_and_send(
            activity.user_id,
            NotificationType.COACH_FEEDBACK,
            "New feedback from your coach",
            f"{coach.name} commented on \"{activity.name}\"",
            from_user_id=coach.id,
            activity_id=activity.id,
        )
        await self.db.commit()
        return activity
