"""
Training plan schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.shared.constants import PlanStatus, SessionType
from app.shared.schemas import CamelModel, UtcDatetime
from app.features.users.schemas import UserSummary
from app.features.activities.schemas import ActivityBrief


class SessionCreate(CamelModel):
    date: UtcDatetime
    session_type: SessionType
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    target_distance: Optional[float] = Field(default=None, gt=0)
    target_duration: Optional[int] = Field(default=None, gt=0)
    target_pace: Optional[float] = Field(default=None, gt=0)


class PlanCreate(CamelModel):
    athlete_id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_date: UtcDatetime
    end_date: UtcDatetime
    sessions: list[SessionCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class PlanUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[PlanStatus] = None
    end_date: Optional[UtcDatetime] = None


class SessionStatusUpdate(CamelModel):
    completed: Optional[bool] = None
    skipped: Optional[bool] = None
    athlete_notes: Optional[str] = Field(default=None, max_length=5000)

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.completed and self.skipped:
            raise ValueError("A session cannot be both completed and skipped")
        return self


class SessionResponse(CamelModel):
    id: str
    plan_id: str
    date: datetime
    session_type: str
    title: str
    description: Optional[str] = None
    target_distance: Optional[float] = None
    target_duration: Optional[int] = None
    target_pace: Optional[float] = None
    completed: bool
    skipped: bool
    athlete_notes: Optional[str] = None
    coach_feedback: Optional[str] = None


class SessionDetail(SessionResponse):
    activities: list[ActivityBrief] = Field(default_factory=list)


class PlanResponse(CamelModel):
    id: str
    coach_id: str
    athlete_id: str
    name: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    status: str
    created_at: datetime
    athlete: Optional[UserSummary] = None
    coach: Optional[UserSummary] = None
    session_count: int = 0
    upcoming_sessions: list[SessionResponse] = Field(default_factory=list)


class PlanDetailBody(PlanResponse):
    sessions: list[SessionDetail] = Field(default_factory=list)


class PlanStats(CamelModel):
    completed_sessions: int
    total_sessions: int
    completion_rate: int  # percent


class PlanDetail(CamelModel):
    plan: PlanDetailBody
    stats: PlanStats


class PlanList(CamelModel):
    plans: list[PlanResponse]


class CalendarSession(SessionResponse):
    plan_name: str
    athlete_id: str


class CalendarResponse(CamelModel):
    sessions: list[CalendarSession]


# === Templates and duplication ===

class TemplateCreate(CamelModel):
    """Save an existing plan as a template; name defaults to the plan's."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)


class TemplateUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)


class TemplateSessionResponse(CamelModel):
    id: str
    day_offset: int
    session_type: str
    title: str
    description: Optional[str] = None
    target_distance: Optional[float] = None
    target_duration: Optional[int] = None
    target_pace: Optional[float] = None


class TemplateResponse(CamelModel):
    id: str
    coach_id: str
    name: str
    description: Optional[str] = None
    duration_days: int
    created_at: datetime
    session_count: int = 0
    sessions: list[TemplateSessionResponse] = Field(default_factory=list)


class TemplateList(CamelModel):
    templates: list[TemplateResponse]


class PlanFromTemplate(CamelModel):
    athlete_id: str
    plan_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: UtcDatetime


class PlanDuplicate(CamelModel):
    target_athlete_id: str
    new_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: UtcDatetime
