"""
Invitation endpoints.

Endpoints:
- POST   /invitations                 - Create invitation (coach)
- GET    /invitations                 - Coach's invitations
- GET    /invitations/verify/{code}   - Public code check
- DELETE /invitations/{invitation_id} - Cancel a pending invitation (coach)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.schemas import MessageResponse
from app.features.auth import require_coach
from app.features.invitations import (
    InvitationCheck,
    InvitationCreate,
    InvitationCreated,
    InvitationList,
    InvitationResponse,
    InvitationService,
    invite_link,
)
from app.features.users import User

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.post("", response_model=InvitationCreated, status_code=201)
async def create_invitation(
    data: InvitationCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    invitation = await InvitationService(db).create(
        coach,
        email=data.email.lower() if data.email else None,
        expires_in_days=data.expires_in_days,
    )
    return InvitationCreated(
        invitation=InvitationResponse.model_validate(invitation),
        invite_link=invite_link(invitation.code),
    )


@router.get("", response_model=InvitationList)
async def list_invitations(
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    """List invitations, newest first. Overdue PENDING ones are expired first."""
    invitations = await InvitationService(db).list_for_coach(coach)
    return InvitationList(invitations=[InvitationResponse.model_validate(i) for i in invitations])


@router.get("/verify/{code}", response_model=InvitationCheck)
async def verify_invitation(
    code: str,
    db: AsyncSession = Depends(get_async_db)
):
    return await InvitationService(db).check(code)


@router.delete("/{invitation_id}", response_model=MessageResponse)
async def cancel_invitation(
    invitation_id: str,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    await InvitationService(db).cancel(coach, invitation_id)
    return MessageResponse(message="Invitation cancelled")
