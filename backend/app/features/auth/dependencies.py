"""
Authentication dependencies.

Provides FastAPI dependencies for:
- The verified session of the caller
- The current user row
- Coach-only endpoints
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.errors import Forbidden, Unauthenticated
from app.features.users.models import User
from app.features.users.repository import UserRepository
from .security import SessionClaims, verify_session

# auto_error=False so a missing header becomes our 401, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionClaims:
    if credentials is None:
        raise Unauthenticated()
    return verify_session(credentials.credentials)


async def get_current_user(
    session: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """
    Get the current authenticated user.

    A valid token for a user that no longer exists is still
    Unauthenticated.
    """
    user = await UserRepository(db).get_by_id(session.user_id)
    if user is None:
        raise Unauthenticated()
    return user


async def require_coach(user: User = Depends(get_current_user)) -> User:
    """Require the COACH role."""
    if not user.is_coach:
        raise Forbidden("Only coaches can perform this action")
    return user
