"""
Invitation repository.

Status transitions go through transition()/expire_overdue(), which are
conditional UPDATEs: a row that already left PENDING is never touched.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import InvitationStatus
from app.shared.repository import BaseRepository
from .models import Invitation

PENDING = InvitationStatus.PENDING.value


class InvitationRepository(BaseRepository[Invitation]):
    """Repository for Invitation operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Invitation)

    async def get_by_code(self, code: str) -> Invitation | None:
        return await self.get_by(code=code)

    async def list_for_coach(self, coach_id: str) -> list[Invitation]:
        """Coach's invitations, newest first."""
        return await self.list(
            Invitation.coach_id == coach_id,
            order_by=Invitation.created_at.desc(),
        )

    async def transition(
        self,
        invitation_id: str,
        status: InvitationStatus,
        **values,
    ) -> bool:
        """
        Move one invitation out of PENDING.

        Args:
            invitation_id: Invitation ID
            status: Target (terminal) status
            **values: Extra columns to set in the same statement

        Returns:
            True if this call performed the transition
        """
        rows = await self.update_where(
            Invitation.id == invitation_id,
            Invitation.status == PENDING,
            status=status.value,
            **values,
        )
        return rows == 1

    async def expire_overdue(self, coach_id: str, now: datetime) -> int:
        """Expire every PENDING invitation of a coach past its expiry."""
        return await self.update_where(
            Invitation.coach_id == coach_id,
            Invitation.status == PENDING,
            Invitation.expires_at < now,
            status=InvitationStatus.EXPIRED.value,
        )
