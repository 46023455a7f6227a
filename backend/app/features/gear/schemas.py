"""
Gear schemas.

The web client calls the gear kind "type"; Python uses gear_type.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.shared.constants import GearStatus, GearType
from app.shared.schemas import CamelModel, UtcDatetime
from app.features.activities.schemas import ActivityBrief


class GearCreate(CamelModel):
    gear_type: GearType = Field(..., alias="type")
    brand: str = Field(..., min_length=1, max_length=50)
    model: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    max_distance: Optional[float] = Field(default=None, gt=0, description="Kilometers")
    purchase_date: Optional[UtcDatetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)


class GearUpdate(CamelModel):
    gear_type: Optional[GearType] = Field(default=None, alias="type")
    brand: Optional[str] = Field(default=None, min_length=1, max_length=50)
    model: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    status: Optional[GearStatus] = None
    max_distance: Optional[float] = Field(default=None, gt=0)
    purchase_date: Optional[UtcDatetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)


class GearAssign(CamelModel):
    gear_id: str


class GearResponse(CamelModel):
    id: str
    user_id: str
    gear_type: str = Field(alias="type")
    brand: str
    model: str
    name: Optional[str] = None
    status: str
    max_distance: Optional[float] = None
    purchase_date: Optional[datetime] = None
    retired_at: Optional[datetime] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime

    total_distance: float = 0.0
    total_duration: int = 0
    total_activities: int = 0
    usage_percent: Optional[int] = None
    needs_replacement: bool = False


class GearDetail(GearResponse):
    recent_activities: list[ActivityBrief] = Field(default_factory=list)


class GearList(CamelModel):
    gear: list[GearResponse]


class GearAlerts(CamelModel):
    alerts: list[GearResponse]


class GearEnvelope(CamelModel):
    gear: GearResponse


class GearDetailEnvelope(CamelModel):
    gear: GearDetail
