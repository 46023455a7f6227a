"""
Extended profile schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.shared.constants import Gender
from app.shared.schemas import CamelModel, UtcDatetime
from app.features.athletes.schemas import PeriodTotals
from app.features.users.schemas import ProfileUpdate, UserResponse

Bpm = Optional[int]


class ProfileDetailsUpdate(ProfileUpdate):
    """Name/avatar plus athlete details. An explicit null clears a detail."""

    birth_date: Optional[UtcDatetime] = None
    gender: Optional[Gender] = None
    weight: Optional[float] = Field(default=None, gt=0, le=500, description="Kilograms")
    height: Optional[float] = Field(default=None, gt=0, le=300, description="Centimeters")
    bio: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=100)
    hr_max: Bpm = Field(default=None, gt=0, le=250)
    hr_rest: Bpm = Field(default=None, gt=0, le=150)
    hr_zone1: Bpm = Field(default=None, gt=0, le=250)
    hr_zone2: Bpm = Field(default=None, gt=0, le=250)
    hr_zone3: Bpm = Field(default=None, gt=0, le=250)
    hr_zone4: Bpm = Field(default=None, gt=0, le=250)
    hr_zone5: Bpm = Field(default=None, gt=0, le=250)


class HrZonesRequest(CamelModel):
    hr_max: int = Field(..., ge=100, le=250)
    hr_rest: Optional[int] = Field(default=None, ge=30, le=150)


class HrZones(CamelModel):
    """Lower bound (bpm) of each of the five zones."""

    hr_max: int
    hr_rest: int
    hr_zone1: int
    hr_zone2: int
    hr_zone3: int
    hr_zone4: int
    hr_zone5: int


class HrZonesResponse(CamelModel):
    zones: HrZones


class ProfileCounts(CamelModel):
    activities: int = 0
    goals: int = 0
    gear: int = 0


class ProfileDetail(UserResponse):
    birth_date: Optional[datetime] = None
    gender: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    hr_max: Bpm = None
    hr_rest: Bpm = None
    hr_zone1: Bpm = None
    hr_zone2: Bpm = None
    hr_zone3: Bpm = None
    hr_zone4: Bpm = None
    hr_zone5: Bpm = None
    strava_connected: bool = False
    counts: ProfileCounts = Field(default_factory=ProfileCounts)
    total_stats: PeriodTotals = Field(default_factory=PeriodTotals)


class ProfileEnvelope(CamelModel):
    profile: ProfileDetail
