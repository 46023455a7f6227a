"""
Session tokens and password hashing.

Provides:
- Password hashing (bcrypt)
- Session token issue/verify (HS256 JWT)
- Short-lived signed state tokens for the Strava OAuth round trip

Verification failures of any kind (bad signature, expired, malformed,
wrong claims) collapse into a single Unauthenticated error.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.shared.constants import UserRole
from app.shared.dates import utcnow
from app.shared.errors import Unauthenticated, ValidationError

BCRYPT_MAX_BYTES = 72
STATE_TOKEN_PURPOSE = "strava_oauth"
STATE_TOKEN_LIFETIME = timedelta(minutes=10)


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token."""

    user_id: str
    email: str
    role: str

    @property
    def is_coach(self) -> bool:
        return self.role == UserRole.COACH.value


def hash_password(password: str) -> str:
    """Hash a password."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            "Password is too long",
            {"password": [f"Must be at most {BCRYPT_MAX_BYTES} bytes"]},
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))


def issue_session(
    user_id: str,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed session token.

    Args:
        user_id: User ID (also stored as the standard 'sub' claim)
        email: User email
        role: COACH or ATHLETE
        expires_delta: Lifetime override (defaults to JWT_EXPIRES_IN)

    Returns:
        Encoded JWT
    """
    now = utcnow()
    payload = {
        "sub": user_id,
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + (expires_delta or settings.session_lifetime),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session(token: Optional[str]) -> SessionClaims:
    """
    Verify a session token.

    Raises:
        Unauthenticated: For every kind of failure, without detail
    """
    if not token:
        raise Unauthenticated()

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise Unauthenticated()

    user_id = payload.get("userId")
    email = payload.get("email")
    role = payload.get("role")
    if not isinstance(user_id, str) or not isinstance(email, str):
        raise Unauthenticated()
    if role not in (UserRole.COACH.value, UserRole.ATHLETE.value):
        raise Unauthenticated()

    return SessionClaims(user_id=user_id, email=email, role=role)


def issue_state_token(user_id: str) -> str:
    """Signed OAuth 'state' binding the round trip to a user."""
    now = utcnow()
    payload = {
        "sub": user_id,
        "purpose": STATE_TOKEN_PURPOSE,
        "iat": now,
        "exp": now + STATE_TOKEN_LIFETIME,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_state_token(state: Optional[str]) -> Optional[str]:
    """
    Verify an OAuth state token.

    Returns:
        The bound user ID, or None if the state is invalid or expired
    """
    if not state:
        return None
    try:
        payload = jwt.decode(state, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("purpose") != STATE_TOKEN_PURPOSE:
        return None
    return payload.get("sub")
