"""
Athlete roster schemas.
"""

from datetime import datetime
from typing import Optional

from app.shared.schemas import CamelModel
from app.features.activities.schemas import ActivityResponse
from app.features.plans.schemas import PlanResponse


class PeriodTotals(CamelModel):
    """Aggregates over a time window."""

    distance: float = 0.0
    duration: int = 0
    elevation: int = 0
    workouts: int = 0
    avg_pace: Optional[float] = None
    avg_heart_rate: Optional[float] = None


class RosterEntry(CamelModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: datetime
    strava_connected: bool = False
    last_activity_date: Optional[datetime] = None
    days_since_last_activity: Optional[int] = None
    week: PeriodTotals


class RosterResponse(CamelModel):
    athletes: list[RosterEntry]


class AthleteStats(CamelModel):
    last_30_days: PeriodTotals
    last_7_days: PeriodTotals


class AthleteDetail(CamelModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    coach_id: Optional[str] = None
    created_at: datetime
    strava_connected: bool = False
    stats: AthleteStats
    recent_activities: list[ActivityResponse]
    active_plans: list[PlanResponse]


class AthleteDetailEnvelope(CamelModel):
    athlete: AthleteDetail
