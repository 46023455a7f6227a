"""
Strava sync orchestration.

Sync Flow (one call):
1. Ask the vault for a valid access token (None -> UpstreamFailure)
2. Fetch one page of recent activities (any fetch error -> UpstreamFailure)
3. For each record, in its own savepoint:
   - skip kinds outside the running allow-list
   - skip (user_id, strava_id) pairs already imported
   - map and insert; a unique-constraint hit is a silent skip,
     any other error is logged and only that record is skipped
   - link to an open planned session on the same day, if any
4. Push session-completed notifications once their savepoint is released,
   notify the coach, re-measure the athlete's goals, commit

Re-running is idempotent: the unique constraint on (user_id, strava_id)
guarantees at most one row per remote activity.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import NotificationType
from app.shared.dates import day_bounds
from app.shared.errors import UpstreamFailure
from app.shared.formatters import format_distance_km, format_duration
from app.features.activities.models import Activity
from app.features.activities.repository import ActivityRepository
from app.features.goals.service import GoalService
from app.features.notifications.models import Notification
from app.features.notifications.service import NotificationService
from app.features.plans.repository import PlanRepository
from app.features.users.repository import UserRepository
from ..client import StravaClient
from ..errors import StravaError
from ..repository import StravaTokenRepository
from ..vault import TokenVault
from .activities import is_synced_type, map_strava_activity
from .config import SyncConfig

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

NOT_CONNECTED = "Strava is not connected or needs re-authorization"
SYNC_FAILED = "Sync failed"


@dataclass
class SyncResult:
    """Outcome of one sync call. Only inserted rows are counted."""

    synced: int = 0
    linked: int = 0
    skipped: int = 0
    failed: int = 0
    activity_ids: list[str] = field(default_factory=list)


@dataclass
class AthleteSyncReport:
    athlete_id: str
    name: str
    synced: int = 0
    linked: int = 0
    error: Optional[str] = None


class StravaSyncService:
    """
    Main sync orchestrator.

    Usage:
        service = StravaSyncService(db, hub)
        result = await service.sync_activities(user_id)
    """

    def __init__(
        self,
        db: AsyncSession,
        hub: Optional["ConnectionHub"] = None,
        vault: Optional[TokenVault] = None,
        client: Optional[StravaClient] = None,
    ):
        self.db = db
        self.vault = vault or TokenVault(db)
        self.client = client or StravaClient()
        self.activities = ActivityRepository(db)
        self.plans = PlanRepository(db)
        self.users = UserRepository(db)
        self.notifier = NotificationService(db, hub)
        self.goals = GoalService(db, hub)

    async def sync_activities(self, user_id: str) -> SyncResult:
        """
        Import recent Strava activities of one user.

        Raises:
            UpstreamFailure: No usable token, or the fetch failed
        """
        access_token = await self.vault.get_valid_access_token(user_id)
        if not access_token:
            raise UpstreamFailure(NOT_CONNECTED)

        try:
            remote = await self.client.get_activities(
                access_token, per_page=SyncConfig.ACTIVITIES_PER_PAGE
            )
        except StravaError as e:
            logger.error(f"Strava fetch failed for user {user_id}: {e}")
            raise UpstreamFailure("Failed to fetch activities from Strava") from e

        result = SyncResult()
        for data in remote:
            await self._sync_one(user_id, data, result)

        if result.synced:
            await self._notify_coach(user_id, result)
            await self.goals.refresh_progress(user_id)

        await self.db.commit()
        logger.info(
            f"Strava sync for user {user_id}: {result.synced} new, {result.linked} linked, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result

    async def _sync_one(self, user_id: str, data: dict, result: SyncResult) -> None:
        """Import one remote record; never raises."""
        if not is_synced_type(data):
            result.skipped += 1
            return

        strava_id = data.get("id")
        try:
            if strava_id is not None and await self.activities.has_strava_id(user_id, int(strava_id)):
                result.skipped += 1
                return

            async with self.db.begin_nested():
                values = map_strava_activity(data)
                activity = await self.activities.create(user_id=user_id, **values)
                notification = await self._link_to_session(user_id, activity)
        except IntegrityError:
            # Duplicate (user_id, strava_id): imported concurrently or repeated in the page
            logger.debug(f"Strava activity {strava_id} already imported for user {user_id}")
            result.skipped += 1
            return
        except Exception as e:
            logger.error(f"Skipping Strava activity {strava_id} for user {user_id}: {e}")
            result.failed += 1
            return

        result.synced += 1
        result.activity_ids.append(activity.id)
        if notification is not None:
            result.linked += 1
            # Pushed only once the savepoint is released
            await self.notifier.push(notification)

    async def _link_to_session(self, user_id: str, activity: Activity) -> Optional[Notification]:
        """
        Attach the activity to an open planned session on the same day.

        Returns:
            The coach's SESSION_COMPLETED notification (persisted, not yet
            pushed) if a session was completed by this activity
        """
        start, end = day_bounds(activity.date.date())
        for session in await self.plans.open_sessions_on_day(user_id, start, end):
            if await self.plans.complete_session(session.id):
                activity.plan_session_id = session.id
                await self.db.flush()
                return await self.notifier.create(
                    session.plan.coach_id,
                    NotificationType.SESSION_COMPLETED,
                    "Session completed",
                    f"\"{session.title}\" completed with {activity.name} "
                    f"({format_distance_km(activity.distance)})",
                    from_user_id=user_id,
                    plan_id=session.plan_id,
                    session_id=session.id,
                    activity_id=activity.id,
                )
        return None

    async def _notify_coach(self, user_id: str, result: SyncResult) -> None:
        athlete = await self.users.get_by_id(user_id)
        if athlete is None or not athlete.coach_id:
            return
        for activity_id in result.activity_ids:
            activity = await self.activities.get_by_id(activity_id)
            await self.notifier.create_and_send(
                athlete.coach_id,
                NotificationType.ACTIVITY_SYNCED,
                "New activity",
                f"{athlete.name}: {activity.name}, {format_distance_km(activity.distance)} "
                f"in {format_duration(activity.duration)}",
                from_user_id=athlete.id,
                activity_id=activity.id,
            )

    async def sync_all_athletes(self, coach_id: str) -> list[AthleteSyncReport]:
        """
        Sync every athlete of a coach that has Strava connected.

        Per-athlete failures are reported, not raised.
        """
        # Plain values: a failed athlete rolls back and expires loaded rows
        athletes = [(a.id, a.name) for a in await self.users.get_athletes(coach_id)]
        connected = await StravaTokenRepository(self.db).connected_user_ids(
            [athlete_id for athlete_id, _ in athletes]
        )

        reports = []
        for athlete_id, name in athletes:
            if athlete_id not in connected:
                continue
            report = AthleteSyncReport(athlete_id=athlete_id, name=name)
            try:
                result = await self.sync_activities(athlete_id)
                report.synced = result.synced
                report.linked = result.linked
            except UpstreamFailure as e:
                await self.db.rollback()
                report.error = e.message
            except Exception:
                await self.db.rollback()
                logger.exception(f"Strava sync failed for athlete {athlete_id}")
                report.error = SYNC_FAILED
            reports.append(report)
        return reports

    async def delete_remote_activity(self, user_id: str, strava_id: int) -> int:
        """Remove a locally imported activity that was deleted on Strava."""
        deleted = await self.activities.delete_by_strava_id(user_id, strava_id)
        await self.db.commit()
        if deleted:
            logger.info(f"Deleted Strava activity {strava_id} of user {user_id}")
        return deleted
