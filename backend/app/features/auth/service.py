"""
Auth Service.

Registration (optionally through an invitation), login and password
changes. Issues session tokens; never logs passwords or tokens.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import UserRole
from app.shared.errors import InvalidCredentials, ValidationError
from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.features.users.schemas import UserResponse, UserSummary
from app.features.invitations.service import InvitationService
from .schemas import RegisterRequest
from .security import hash_password, issue_session, verify_password

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email is already registered"


class AuthService:
    """Account lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Create an account and issue a session.

        When an athlete registers with an invitation code, the code is
        consumed in the same transaction as the user insert and the new
        athlete is attached to the inviting coach.

        Raises:
            ValidationError: Duplicate email or unusable invitation code
        """
        email = data.email.lower()
        if await self.users.get_by_email(email):
            raise ValidationError(EMAIL_TAKEN, {"email": [EMAIL_TAKEN]})

        coach_id = None
        if data.role == UserRole.ATHLETE.value and data.invitation_code:
            coach_id = await InvitationService(self.db).consume(data.invitation_code, email)

        try:
            user = await self.users.create(
                email=email,
                password_hash=hash_password(data.password),
                name=data.name,
                role=data.role,
                coach_id=coach_id,
            )
            await self.db.commit()
        except IntegrityError:
            # Concurrent registration with the same email; acceptance rolls back too
            await self.db.rollback()
            raise ValidationError(EMAIL_TAKEN, {"email": [EMAIL_TAKEN]})

        logger.info(f"Registered {user.role} {user.id}" + (f" (coach {coach_id})" if coach_id else ""))
        return user, issue_session(user.id, user.email, user.role)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and issue a session.

        Raises:
            InvalidCredentials: Unknown email or wrong password
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials()
        return user, issue_session(user.id, user.email, user.role)

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise ValidationError(
                "Current password is incorrect",
                {"currentPassword": ["Current password is incorrect"]},
            )
        await self.users.update(user, password_hash=hash_password(new_password))
        await self.db.commit()
        logger.info(f"Password changed for user {user.id}")

    async def describe(self, user: User) -> UserResponse:
        """User record with the coach card attached."""
        coach = None
        if user.coach_id:
            coach_user = await self.users.get_by_id(user.coach_id)
            if coach_user is not None:
                coach = UserSummary.model_validate(coach_user)

        response = UserResponse.model_validate(user)
        response.coach = coach
        return response
