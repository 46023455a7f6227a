"""
Activity schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from app.shared.constants import ActivityType
from app.shared.schemas import CamelModel, UtcDatetime


class ActivityCreate(CamelModel):
    """Manual activity."""

    name: str = Field(..., min_length=1, max_length=255)
    activity_type: ActivityType = ActivityType.RUNNING
    date: UtcDatetime
    distance: float = Field(..., gt=0, description="Kilometers")
    duration: int = Field(..., gt=0, description="Seconds")
    elevation_gain: float = Field(default=0, ge=0)
    avg_pace: Optional[float] = Field(default=None, gt=0, description="Seconds per km")
    avg_heart_rate: Optional[int] = Field(default=None, gt=0, lt=260)
    max_heart_rate: Optional[int] = Field(default=None, gt=0, lt=260)
    calories: Optional[int] = Field(default=None, ge=0)
    start_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    start_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    notes: Optional[str] = Field(default=None, max_length=5000)
    perceived_effort: Optional[int] = Field(default=None, ge=1, le=10)
    plan_session_id: Optional[str] = None


class ActivityUpdate(CamelModel):
    """Partial update by the owner."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    activity_type: Optional[ActivityType] = None
    date: Optional[UtcDatetime] = None
    distance: Optional[float] = Field(default=None, gt=0)
    duration: Optional[int] = Field(default=None, gt=0)
    elevation_gain: Optional[float] = Field(default=None, ge=0)
    avg_pace: Optional[float] = Field(default=None, gt=0)
    avg_heart_rate: Optional[int] = Field(default=None, gt=0, lt=260)
    max_heart_rate: Optional[int] = Field(default=None, gt=0, lt=260)
    calories: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=5000)
    perceived_effort: Optional[int] = Field(default=None, ge=1, le=10)


class ActivityBrief(CamelModel):
    id: str
    name: str
    date: datetime
    distance: float
    duration: int
    avg_pace: Optional[float] = None


class ActivityResponse(CamelModel):
    id: str
    user_id: str
    strava_id: Optional[int] = None
    name: str
    activity_type: str
    date: datetime
    distance: float
    duration: int
    elevation_gain: int
    avg_pace: Optional[float] = None
    avg_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    calories: Optional[int] = None
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None
    map_polyline: Optional[str] = None
    splits: Optional[Any] = None
    notes: Optional[str] = None
    perceived_effort: Optional[int] = None
    coach_feedback: Optional[str] = None
    plan_session_id: Optional[str] = None
    created_at: datetime


class ActivityDetail(ActivityResponse):
    """Single activity with its decoded route."""

    route: list[list[float]] = Field(default_factory=list)


class ActivityList(CamelModel):
    activities: list[ActivityResponse]
    total: int


class ActivityEnvelope(CamelModel):
    activity: ActivityResponse


class ActivityDetailEnvelope(CamelModel):
    activity: ActivityDetail
