"""
Tests for registration, login and password change.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from app.shared.constants import InvitationStatus
from app.shared.dates import utcnow
from app.shared.errors import InvalidCredentials, ValidationError
from app.features.auth.schemas import RegisterRequest
from app.features.auth.security import verify_password, verify_session
from app.features.auth.service import AuthService
from app.features.invitations.models import Invitation
from app.features.invitations.repository import InvitationRepository
from app.features.users.models import User

from tests.helpers import PASSWORD, load_user


def register_request(**overrides) -> RegisterRequest:
    values = {
        "email": "new.runner@example.com",
        "password": "longenough",
        "name": "New Runner",
    }
    values.update(overrides)
    return RegisterRequest(**values)


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_athlete_without_code(self, db, users):
        user, token = await AuthService(db).register(register_request())

        assert user.role == "ATHLETE"
        assert user.coach_id is None
        assert verify_session(token).user_id == user.id

    @pytest.mark.asyncio
    async def test_email_is_lowercased(self, db, users):
        user, _ = await AuthService(db).register(register_request(email="Mixed.Case@Example.com"))
        assert user.email == "mixed.case@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db, users):
        with pytest.raises(ValidationError) as exc:
            await AuthService(db).register(register_request(email="COACH@example.com"))
        assert "email" in exc.value.details

    @pytest.mark.asyncio
    async def test_register_with_invitation(self, db, users, seed):
        seed(Invitation(
            coach_id=users.coach.id,
            code="ABC123",
            status=InvitationStatus.PENDING.value,
            expires_at=utcnow() + timedelta(days=7),
        ))

        user, _ = await AuthService(db).register(register_request(invitation_code="abc123"))

        assert user.coach_id == users.coach.id

    @pytest.mark.asyncio
    async def test_coach_ignores_invitation_code(self, db, users, seed):
        seed(Invitation(
            coach_id=users.coach.id,
            code="C0DE0001",
            status=InvitationStatus.PENDING.value,
            expires_at=utcnow() + timedelta(days=7),
        ))

        user, _ = await AuthService(db).register(
            register_request(role="COACH", invitation_code="C0DE0001")
        )

        assert user.coach_id is None
        invitation = await InvitationRepository(db).get_by_code("C0DE0001")
        assert invitation.status == InvitationStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_failed_invitation_creates_no_user(self, db, users):
        with pytest.raises(ValidationError):
            await AuthService(db).register(register_request(invitation_code="NOPE"))

        await db.rollback()
        result = await db.execute(select(User).where(User.email == "new.runner@example.com"))
        assert result.scalar_one_or_none() is None


class TestLogin:

    @pytest.mark.asyncio
    async def test_login(self, db, users):
        user, token = await AuthService(db).login("athlete@example.com", PASSWORD)
        assert user.id == users.athlete.id
        assert verify_session(token).role == "ATHLETE"

    @pytest.mark.asyncio
    async def test_email_is_case_insensitive(self, db, users):
        user, _ = await AuthService(db).login("Athlete@Example.com", PASSWORD)
        assert user.id == users.athlete.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [
        ("athlete@example.com", "wrong-password"),
        ("nobody@example.com", PASSWORD),
    ])
    async def test_single_failure_message(self, db, users, email, password):
        with pytest.raises(InvalidCredentials) as exc:
            await AuthService(db).login(email, password)
        assert exc.value.message == "Invalid credentials"


class TestChangePassword:

    @pytest.mark.asyncio
    async def test_change_password(self, db, users):
        user = await load_user(db, users.athlete.id)
        await AuthService(db).change_password(user, PASSWORD, "brand-new-pass")

        await db.refresh(user)
        assert verify_password("brand-new-pass", user.password_hash)

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, db, users):
        user = await load_user(db, users.athlete.id)
        with pytest.raises(ValidationError):
            await AuthService(db).change_password(user, "not-it", "brand-new-pass")
