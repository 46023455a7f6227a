"""
Strava API schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from app.shared.schemas import CamelModel


class StravaAuthUrl(CamelModel):
    auth_url: str


class StravaStatus(CamelModel):
    connected: bool
    strava_athlete_id: Optional[str] = None
    last_sync: Optional[datetime] = None


class SyncResponse(CamelModel):
    message: str
    synced_activities: int
    linked_to_plans: int


class AthleteSyncResult(CamelModel):
    athlete_id: str
    name: str
    synced: int
    linked: int
    error: Optional[str] = None


class SyncAllResponse(CamelModel):
    results: list[AthleteSyncResult]


class WebhookEvent(BaseModel):
    """
    Strava push subscription event.

    Strava sends snake_case keys; extra fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    object_type: str
    object_id: int
    aspect_type: str
    owner_id: int
    subscription_id: Optional[int] = None
    event_time: Optional[int] = None
    updates: Optional[dict[str, Any]] = None
