"""
Dashboard schemas.
"""

from datetime import date
from typing import Optional

from app.shared.schemas import CamelModel
from app.features.activities.schemas import ActivityResponse
from app.features.athletes.schemas import PeriodTotals
from app.features.plans.schemas import PlanResponse, PlanStats
from app.features.users.schemas import UserResponse


class DayProgress(CamelModel):
    day: date
    distance: float
    duration: int


class DashboardStats(CamelModel):
    week: PeriodTotals
    month: PeriodTotals
    total_distance: float
    total_workouts: int
    streak_days: int


class ActivePlanProgress(CamelModel):
    plan: PlanResponse
    stats: PlanStats


class Dashboard(CamelModel):
    user: UserResponse
    strava_connected: bool
    unread_messages: int
    unread_notifications: int
    stats: DashboardStats
    weekly_progress: list[DayProgress]
    recent_activities: list[ActivityResponse]
    active_plan: Optional[ActivePlanProgress] = None
