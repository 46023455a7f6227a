"""
Goal and historical stats schemas.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from app.shared.constants import GoalPeriod, GoalStatus, GoalType
from app.shared.schemas import CamelModel, UtcDatetime


class GoalCreate(CamelModel):
    """
    New goal. Windows are derived from the period; only CUSTOM takes
    explicit dates, and its end date counts as a whole day.
    """

    goal_type: GoalType = Field(..., alias="type")
    period: GoalPeriod
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    target_value: float = Field(..., gt=0)
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    notify_at_50: bool = True
    notify_at_75: bool = True
    notify_at_100: bool = True

    @model_validator(mode="after")
    def check_custom_window(self):
        if self.period == GoalPeriod.CUSTOM.value:
            if self.start_date is None or self.end_date is None:
                raise ValueError("CUSTOM goals need startDate and endDate")
            if self.end_date < self.start_date:
                raise ValueError("endDate must not be before startDate")
        return self


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    target_value: Optional[float] = Field(default=None, gt=0)
    status: Optional[GoalStatus] = None


class GoalResponse(CamelModel):
    id: str
    user_id: str
    goal_type: str = Field(alias="type")
    period: str
    title: str
    description: Optional[str] = None
    target_value: float
    current_value: float
    start_date: datetime
    end_date: datetime
    status: str
    completed_at: Optional[datetime] = None
    notify_at_50: bool
    notify_at_75: bool
    notify_at_100: bool
    created_at: datetime
    progress_percent: int = 0
    days_remaining: int = 0


class GoalList(CamelModel):
    goals: list[GoalResponse]


class GoalEnvelope(CamelModel):
    goal: GoalResponse


class MonthStats(CamelModel):
    year: int
    month: int
    label: str
    distance: float
    duration: int
    elevation: int
    workouts: int
    avg_pace: Optional[float] = None
    avg_heart_rate: Optional[int] = None


class WeekStats(CamelModel):
    start_date: date
    distance: float
    duration: int
    workouts: int


class MonthComparison(CamelModel):
    """Current month against the previous one, in whole percent."""

    distance: int = 0
    duration: int = 0
    workouts: int = 0


class HistoricalStats(CamelModel):
    monthly: list[MonthStats]
    weekly: list[WeekStats]
    comparison: MonthComparison
