"""
Invitations module.

Usage:
    from app.features.invitations import InvitationService

    service = InvitationService(db)
    invitation = await service.create(coach, expires_in_days=7)
    coach_id = await service.consume(code, email)
"""

from .models import Invitation
from .schemas import (
    InvitationCreate,
    InvitationResponse,
    InvitationCreated,
    InvitationList,
    InvitationCheck,
)
from .repository import InvitationRepository
from .service import InvitationService, invite_link

__all__ = [
    "Invitation",
    "InvitationCreate",
    "InvitationResponse",
    "InvitationCreated",
    "InvitationList",
    "InvitationCheck",
    "InvitationRepository",
    "InvitationService",
    "invite_link",
]
