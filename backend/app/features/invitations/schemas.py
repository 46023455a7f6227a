"""
Invitation schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.config import settings
from app.shared.schemas import CamelModel
from app.features.users.schemas import UserSummary


class InvitationCreate(CamelModel):
    email: Optional[EmailStr] = None
    expires_in_days: int = Field(default=settings.invitation_default_days, ge=1, le=30)


class InvitationResponse(CamelModel):
    id: str
    coach_id: str
    code: str
    email: Optional[str] = None
    status: str
    expires_at: datetime
    used_at: Optional[datetime] = None
    used_by_email: Optional[str] = None
    created_at: datetime


class InvitationCreated(CamelModel):
    invitation: InvitationResponse
    invite_link: str


class InvitationList(CamelModel):
    invitations: list[InvitationResponse]


class InvitationCheck(CamelModel):
    """Public answer to 'is this code usable?'."""

    valid: bool
    coach: Optional[UserSummary] = None
    email: Optional[str] = None
