"""
Invitation Service.

Coaches mint single-use codes; athletes consume them at registration.

Code uniqueness is enforced by the unique index on invitations.code:
a colliding insert is rolled back to its savepoint and a new code is
drawn. Consumption is a conditional PENDING -> ACCEPTED update, so a
code can be accepted at most once even under concurrent registrations.
"""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.shared.constants import INVITATION_CODE_BYTES, InvitationStatus
from app.shared.dates import utcnow
from app.shared.errors import Conflict, NotFound, ValidationError
from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.features.users.schemas import UserSummary
from .models import Invitation
from .repository import InvitationRepository
from .schemas import InvitationCheck

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5

INVALID_CODE = "Invalid invitation code"
ALREADY_USED = "Invitation already used or expired"
HAS_EXPIRED = "Invitation has expired"


def generate_code() -> str:
    """8 uppercase hex characters."""
    return secrets.token_hex(INVITATION_CODE_BYTES).upper()


def normalize_code(code: str) -> str:
    return code.strip().upper()


def invite_link(code: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/register?code={code}"


class InvitationService:
    """Invitation lifecycle operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.invitations = InvitationRepository(db)

    async def create(
        self,
        coach: User,
        email: str | None = None,
        expires_in_days: int | None = None,
    ) -> Invitation:
        """
        Mint a new invitation for a coach.

        Raises:
            Conflict: If no unique code could be drawn
        """
        days = expires_in_days or settings.invitation_default_days
        expires_at = utcnow() + timedelta(days=days)

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = generate_code()
            try:
                async with self.db.begin_nested():
                    invitation = await self.invitations.create(
                        coach_id=coach.id,
                        code=code,
                        email=email,
                        expires_at=expires_at,
                        status=InvitationStatus.PENDING.value,
                    )
            except IntegrityError:
                logger.warning(f"Invitation code collision (attempt {attempt})")
                continue

            await self.db.commit()
            logger.info(f"Coach {coach.id} created invitation {code} (expires in {days}d)")
            return invitation

        raise Conflict("Could not allocate a unique invitation code")

    async def list_for_coach(self, coach: User) -> list[Invitation]:
        """Expire overdue invitations, then list the coach's invitations."""
        expired = await self.invitations.expire_overdue(coach.id, utcnow())
        if expired:
            logger.info(f"Expired {expired} overdue invitation(s) of coach {coach.id}")
        await self.db.commit()
        return await self.invitations.list_for_coach(coach.id)

    async def _expire(self, invitation: Invitation) -> None:
        # Persist the transition even though the caller is about to fail
        if await self.invitations.transition(invitation.id, InvitationStatus.EXPIRED):
            await self.db.commit()

    async def check(self, code: str) -> InvitationCheck:
        """
        Public check of a code before registration.

        Raises:
            NotFound: Unknown code
            ValidationError: Code is no longer usable
        """
        invitation = await self.invitations.get_by_code(normalize_code(code))
        if invitation is None:
            raise NotFound(INVALID_CODE)
        if not invitation.is_pending:
            raise ValidationError(ALREADY_USED)
        if invitation.is_expired():
            await self._expire(invitation)
            raise ValidationError(HAS_EXPIRED)

        coach = await UserRepository(self.db).get_by_id(invitation.coach_id)
        return InvitationCheck(
            valid=True,
            coach=UserSummary.model_validate(coach) if coach else None,
            email=invitation.email,
        )

    async def consume(self, code: str, email: str) -> str:
        """
        Accept an invitation on behalf of a registering athlete.

        Does not commit: the acceptance becomes durable together with
        the new user row.

        Args:
            code: Invitation code as typed by the user
            email: Registering email

        Returns:
            The inviting coach's ID

        Raises:
            ValidationError: Unknown, used, cancelled or expired code
        """
        invitation = await self.invitations.get_by_code(normalize_code(code))
        if invitation is None:
            raise ValidationError(INVALID_CODE, {"invitationCode": [INVALID_CODE]})
        if not invitation.is_pending:
            raise ValidationError(ALREADY_USED, {"invitationCode": [ALREADY_USED]})

        now = utcnow()
        if invitation.is_expired(now):
            await self._expire(invitation)
            raise ValidationError(HAS_EXPIRED, {"invitationCode": [HAS_EXPIRED]})

        accepted = await self.invitations.transition(
            invitation.id,
            InvitationStatus.ACCEPTED,
            used_at=now,
            used_by_email=email,
        )
        if not accepted:
            # Lost the race against another registration or a cancellation
            raise ValidationError(ALREADY_USED, {"invitationCode": [ALREADY_USED]})

        logger.info(f"Invitation {invitation.code} accepted")
        return invitation.coach_id

    async def cancel(self, coach: User, invitation_id: str) -> None:
        """
        Cancel a PENDING invitation of this coach.

        Raises:
            NotFound: Not this coach's invitation
            ValidationError: Invitation is no longer PENDING
        """
        invitation = await self.invitations.get_by_id(invitation_id)
        if invitation is None or invitation.coach_id != coach.id:
            raise NotFound("Invitation not found")

        if not await self.invitations.transition(invitation.id, InvitationStatus.CANCELLED):
            raise ValidationError("Only pending invitations can be cancelled")

        await self.db.commit()
        logger.info(f"Coach {coach.id} cancelled invitation {invitation.code}")
