"""
Athlete Service.

The coach's view of their roster and of a single athlete. All
aggregation happens in SQL (see ActivityRepository.totals).
"""

import logging
from dataclasses import asdict
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.dates import days_between, utcnow
from app.shared.errors import NotFound
from app.features.access.policy import AccessPolicy
from app.features.activities.repository import ActivityRepository
from app.features.activities.schemas import ActivityResponse
from app.features.plans.service import PlanService
from app.features.strava.repository import StravaTokenRepository
from app.features.users.models import User
from app.features.users.repository import UserRepository
from .schemas import AthleteDetail, AthleteStats, PeriodTotals, RosterEntry

logger = logging.getLogger(__name__)

ATHLETE_NOT_FOUND = "Athlete not found"
RECENT_ACTIVITIES = 10


class AthleteService:
    """Roster, athlete detail and unlinking."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.activities = ActivityRepository(db)
        self.tokens = StravaTokenRepository(db)
        self.policy = AccessPolicy(db)

    async def _period(self, user_id: str, days: int) -> PeriodTotals:
        totals = await self.activities.totals(user_id, since=utcnow() - timedelta(days=days))
        return PeriodTotals(**asdict(totals))

    async def roster(self, coach: User) -> list[RosterEntry]:
        """All athletes of a coach, ordered by name."""
        athletes = await self.users.get_athletes(coach.id)
        connected = await self.tokens.connected_user_ids([a.id for a in athletes])
        now = utcnow()

        entries = []
        for athlete in athletes:
            last_date = await self.activities.last_activity_date(athlete.id)
            entries.append(RosterEntry(
                id=athlete.id,
                name=athlete.name,
                email=athlete.email,
                avatar=athlete.avatar,
                created_at=athlete.created_at,
                strava_connected=athlete.id in connected,
                last_activity_date=last_date,
                days_since_last_activity=days_between(last_date, now) if last_date else None,
                week=await self._period(athlete.id, 7),
            ))
        return entries

    async def detail(self, viewer: User, athlete_id: str) -> AthleteDetail:
        """
        One athlete with stats, recent activities and active plans.

        Raises:
            NotFound: Unknown athlete, or the viewer is neither the
                athlete nor their coach
        """
        athlete = await self.users.get_by_id(athlete_id)
        if athlete is None:
            raise NotFound(ATHLETE_NOT_FOUND)
        await self.policy.ensure_visible(viewer, athlete.id, ATHLETE_NOT_FOUND)

        recent = await self.activities.recent(athlete.id, RECENT_ACTIVITIES)
        plans = await PlanService(self.db).upcoming_for_athlete(athlete.id)

        return AthleteDetail(
            id=athlete.id,
            name=athlete.name,
            email=athlete.email,
            avatar=athlete.avatar,
            coach_id=athlete.coach_id,
            created_at=athlete.created_at,
            strava_connected=await self.tokens.exists(user_id=athlete.id),
            stats=AthleteStats(
                last_30_days=await self._period(athlete.id, 30),
                last_7_days=await self._period(athlete.id, 7),
            ),
            recent_activities=[ActivityResponse.model_validate(a) for a in recent],
            active_plans=plans,
        )

    async def remove(self, coach: User, athlete_id: str) -> None:
        """
        Unlink an athlete from the coach.

        Raises:
            NotFound: The athlete is not this coach's
        """
        await self.policy.remove_athlete(coach.id, athlete_id)
        await self.db.commit()
