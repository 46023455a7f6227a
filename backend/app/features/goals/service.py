"""
Goal Service.

Personal goals over a period window, plus the historical stats page.

Progress Flow:
1. current_value is measured from the user's activities in the window
   (STREAK goals count the running streak instead)
2. Reaching the target completes the goal; a passed window fails it
3. Crossing 50/75/100 percent sends at most one notification per
   refresh, for the highest milestone whose flag is on

refresh_progress() runs on listing and whenever activities are logged
or imported; it flushes but never commits.
"""

import calendar
import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import GoalPeriod, GoalStatus, GoalType, NotificationType
from app.shared.dates import utcnow
from app.shared.errors import NotFound
from app.features.activities.repository import ActivityRepository
from app.features.activities.stats import (
    STREAK_LOOKBACK_DAYS,
    add_months,
    month_start,
    monthly,
    percent_change,
    streak_days,
    week_start,
    weekly,
)
from app.features.notifications.service import NotificationService
from app.features.users.models import User
from .models import Goal
from .repository import GoalRepository
from .schemas import (
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    HistoricalStats,
    MonthComparison,
    MonthStats,
    WeekStats,
)

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

GOAL_NOT_FOUND = "Goal not found"
HISTORY_WEEKS = 4
MILESTONES = ((50, "notify_at_50"), (75, "notify_at_75"), (100, "notify_at_100"))


def goal_window(
    period: str,
    now: datetime,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    [start, end) of a goal created at `now`.

    Weeks start on Monday. A CUSTOM end date includes its whole day.
    """
    today = now.date()
    if period == GoalPeriod.WEEKLY.value:
        first = week_start(today)
        last = first + timedelta(days=7)
    elif period == GoalPeriod.MONTHLY.value:
        first = month_start(today)
        last = add_months(today, 1)
    elif period == GoalPeriod.YEARLY.value:
        first = date(today.year, 1, 1)
        last = date(today.year + 1, 1, 1)
    else:
        first = start.date()
        last = end.date() + timedelta(days=1)
    return datetime.combine(first, time.min), datetime.combine(last, time.min)


def progress_percent(current: float, target: float) -> int:
    return min(100, round(current / target * 100)) if target else 0


def days_remaining(end: datetime, now: datetime) -> int:
    return max(0, math.ceil((end - now).total_seconds() / 86400))


def to_response(goal: Goal, now: Optional[datetime] = None) -> GoalResponse:
    response = GoalResponse.model_validate(goal)
    response.progress_percent = progress_percent(goal.current_value, goal.target_value)
    response.days_remaining = days_remaining(goal.end_date, now or utcnow())
    return response


class GoalService:
    """Goal CRUD, progress tracking and historical stats."""

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.goals = GoalRepository(db)
        self.activities = ActivityRepository(db)
        self.notifier = NotificationService(db, hub)

    async def _get_owned(self, user: User, goal_id: str) -> Goal:
        goal = await self.goals.get_by_id(goal_id)
        if goal is None or goal.user_id != user.id:
            raise NotFound(GOAL_NOT_FOUND)
        return goal

    # === Progress ===

    async def measure(self, goal: Goal, now: datetime) -> float:
        """Current value of a goal, in the goal type's unit."""
        if goal.goal_type == GoalType.STREAK.value:
            days = await self.activities.active_days(
                goal.user_id, now - timedelta(days=STREAK_LOOKBACK_DAYS)
            )
            return float(streak_days(days, now.date()))

        totals = await self.activities.totals(goal.user_id, since=goal.start_date, until=goal.end_date)
        if goal.goal_type == GoalType.DISTANCE.value:
            return totals.distance
        if goal.goal_type == GoalType.DURATION.value:
            return round(totals.duration / 3600, 2)
        if goal.goal_type == GoalType.ELEVATION.value:
            return float(totals.elevation)
        return float(totals.workouts)

    async def _evaluate(self, goal: Goal, now: datetime, notify: bool = True) -> None:
        goal.current_value = await self.measure(goal, now)
        percent = progress_percent(goal.current_value, goal.target_value)

        reached = max((m for m, _ in MILESTONES if percent >= m), default=0)
        if reached > goal.last_milestone:
            announce = [
                m for m, flag in MILESTONES
                if goal.last_milestone < m <= reached and getattr(goal, flag)
            ]
            if notify and announce:
                await self._notify_milestone(goal, announce[-1])
            goal.last_milestone = reached

        if goal.current_value >= goal.target_value:
            goal.status = GoalStatus.COMPLETED.value
            goal.completed_at = now
        elif now >= goal.end_date:
            goal.status = GoalStatus.FAILED.value

    async def _notify_milestone(self, goal: Goal, milestone: int) -> None:
        if milestone == 100:
            await self.notifier.create_and_send(
                goal.user_id,
                NotificationType.GOAL_COMPLETED,
                "Goal reached",
                f"You reached your goal \"{goal.title}\"",
            )
        else:
            await self.notifier.create_and_send(
                goal.user_id,
                NotificationType.GOAL_MILESTONE,
                f"Goal {milestone}% done",
                f"\"{goal.title}\" is {milestone}% complete",
            )

    async def refresh_progress(self, user_id: str) -> None:
        """Re-measure every ACTIVE goal of a user."""
        now = utcnow()
        for goal in await self.goals.active(user_id):
            await self._evaluate(goal, now)
        await self.db.flush()

    # === CRUD ===

    async def list_goals(
        self,
        user: User,
        status: Optional[str] = None,
        include_completed: bool = False,
    ) -> list[GoalResponse]:
        """ACTIVE goals unless a status is given or completed ones are asked for."""
        await self.refresh_progress(user.id)
        await self.db.commit()

        if status is None and not include_completed:
            status = GoalStatus.ACTIVE.value
        now = utcnow()
        return [to_response(g, now) for g in await self.goals.for_user(user.id, status)]

    async def create(self, user: User, data: GoalCreate) -> Goal:
        """
        Create a goal; progress already made in the window counts.

        A goal that is met on creation starts out COMPLETED without a
        notification.
        """
        now = utcnow()
        start, end = goal_window(data.period, now, data.start_date, data.end_date)
        goal = Goal(
            user_id=user.id,
            start_date=start,
            end_date=end,
            current_value=0.0,
            last_milestone=0,
            status=GoalStatus.ACTIVE.value,
            **data.model_dump(exclude={"start_date", "end_date"}),
        )
        await self._evaluate(goal, now, notify=False)
        self.db.add(goal)
        await self.db.commit()
        logger.info(f"User {user.id} created {goal.goal_type} goal {goal.id}")
        return goal

    async def update(self, user: User, goal_id: str, data: GoalUpdate) -> Goal:
        """
        Edit a goal. An ACTIVE goal is re-measured against its target.
        """
        goal = await self._get_owned(user, goal_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items()
                   if v is not None or k == "description"}
        await self.goals.update(goal, **changes)

        if goal.status == GoalStatus.ACTIVE.value:
            goal.completed_at = None
            await self._evaluate(goal, utcnow())
        await self.db.commit()
        return goal

    async def delete(self, user: User, goal_id: str) -> None:
        goal = await self._get_owned(user, goal_id)
        await self.goals.delete(goal)
        await self.db.commit()

    # === Historical stats ===

    async def historical(self, user: User, months: int = 6) -> HistoricalStats:
        """
        Monthly series for the last `months` months (current included),
        weekly series for the last HISTORY_WEEKS weeks and the change of
        the current month against the previous one.
        """
        today = utcnow().date()
        current_month = month_start(today)
        first_month = add_months(current_month, -(max(months, 2) - 1))
        first_week = week_start(today) - timedelta(weeks=HISTORY_WEEKS - 1)
        since = min(first_month, first_week)

        points = await self.activities.points(user.id, datetime.combine(since, time.min))

        by_month = monthly(points, first_month, max(months, 2))
        previous, current = by_month[-2], by_month[-1]
        return HistoricalStats(
            monthly=[
                MonthStats(
                    year=b.start.year,
                    month=b.start.month,
                    label=calendar.month_abbr[b.start.month],
                    distance=b.distance,
                    duration=b.duration,
                    elevation=b.elevation,
                    workouts=b.workouts,
                    avg_pace=b.avg_pace,
                    avg_heart_rate=b.avg_heart_rate,
                )
                for b in by_month[-months:]
            ],
            weekly=[
                WeekStats(start_date=b.start, distance=b.distance, duration=b.duration, workouts=b.workouts)
                for b in weekly(points, first_week, HISTORY_WEEKS)
            ],
            comparison=MonthComparison(
                distance=percent_change(current.distance, previous.distance),
                duration=percent_change(current.duration, previous.duration),
                workouts=percent_change(current.workouts, previous.workouts),
            ),
        )
