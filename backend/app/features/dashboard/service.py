"""
Dashboard Service.

Everything the home screen shows for the signed-in user in one call.
Weeks start on Monday; "today" is the UTC day.
"""

from dataclasses import asdict
from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.dates import utcnow
from app.features.activities.repository import ActivityRepository
from app.features.activities.schemas import ActivityResponse
from app.features.activities.stats import STREAK_LOOKBACK_DAYS, daily, month_start, streak_days, week_start
from app.features.athletes.schemas import PeriodTotals
from app.features.auth.service import AuthService
from app.features.messages.repository import MessageRepository
from app.features.notifications.repository import NotificationRepository
from app.features.plans.repository import PlanRepository
from app.features.plans.service import PlanService, plan_stats
from app.features.strava.repository import StravaTokenRepository
from app.features.users.models import User
from .schemas import ActivePlanProgress, Dashboard, DashboardStats, DayProgress

RECENT_ACTIVITIES = 5


def midnight(day) -> datetime:
    return datetime.combine(day, time.min)


class DashboardService:
    """Builds the home screen for one user."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityRepository(db)
        self.plans = PlanRepository(db)

    async def _active_plan(self, user: User) -> Optional[ActivePlanProgress]:
        plans = await self.plans.active_plans(user.id)
        if not plans:
            return None
        plan = plans[0]
        return ActivePlanProgress(
            plan=await PlanService(self.db).to_response(plan),
            stats=plan_stats(plan.sessions),
        )

    async def build(self, user: User) -> Dashboard:
        now = utcnow()
        today = now.date()
        monday = week_start(today)

        week = await self.activities.totals(user.id, since=midnight(monday))
        month = await self.activities.totals(user.id, since=midnight(month_start(today)))
        overall = await self.activities.totals(user.id)

        this_week = await self.activities.points(user.id, midnight(monday))
        active_days = await self.activities.active_days(
            user.id, midnight(today - timedelta(days=STREAK_LOOKBACK_DAYS))
        )
        recent = await self.activities.recent(user.id, RECENT_ACTIVITIES)

        return Dashboard(
            user=await AuthService(self.db).describe(user),
            strava_connected=await StravaTokenRepository(self.db).exists(user_id=user.id),
            unread_messages=await MessageRepository(self.db).unread_total(user.id),
            unread_notifications=await NotificationRepository(self.db).count_unread(user.id),
            stats=DashboardStats(
                week=PeriodTotals(**asdict(week)),
                month=PeriodTotals(**asdict(month)),
                total_distance=overall.distance,
                total_workouts=overall.workouts,
                streak_days=streak_days(active_days, today),
            ),
            weekly_progress=[
                DayProgress(day=b.start, distance=b.distance, duration=b.duration)
                for b in daily(this_week, monday, 7)
            ],
            recent_activities=[ActivityResponse.model_validate(a) for a in recent],
            active_plan=await self._active_plan(user),
        )
