"""
User schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, Field, field_serializer

from app.shared.schemas import CamelModel


class UserSummary(CamelModel):
    """Minimal user card (coach of an athlete, message counterpart)."""

    id: str
    name: str
    avatar: Optional[str] = None


class UserResponse(CamelModel):
    """The authenticated user's own record."""

    id: str
    email: str
    name: str
    role: str
    avatar: Optional[str] = None
    coach_id: Optional[str] = None
    created_at: datetime
    coach: Optional[UserSummary] = None


class ProfileUpdate(CamelModel):
    """Profile update request. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    avatar: Optional[AnyHttpUrl] = None

    @field_serializer("avatar")
    def _avatar_str(self, value: Optional[AnyHttpUrl]) -> Optional[str]:
        return str(value) if value is not None else None


class PublicProfile(CamelModel):
    """What any signed-in user may see about another user."""

    id: str
    name: str
    role: str
    avatar: Optional[str] = None
    created_at: datetime
    activity_count: int = 0
    athlete_count: int = 0
