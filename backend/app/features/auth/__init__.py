"""
Authentication and sessions.

Usage:
    from app.features.auth import get_current_user, require_coach

    @router.get("/me")
    async def me(user: User = Depends(get_current_user)):
        ...

Components:
- security: password hashing, session and OAuth state tokens
- dependencies: FastAPI dependencies for protected endpoints
- AuthService: register / login / change password
"""

from .security import (
    SessionClaims,
    issue_session,
    verify_session,
    hash_password,
    verify_password,
    issue_state_token,
    verify_state_token,
)
from .schemas import (
    RegisterRequest,
    LoginRequest,
    ChangePasswordRequest,
    AuthResponse,
    MeResponse,
)
from .dependencies import get_current_session, get_current_user, require_coach
from .service import AuthService

__all__ = [
    "SessionClaims",
    "issue_session",
    "verify_session",
    "hash_password",
    "verify_password",
    "issue_state_token",
    "verify_state_token",
    "RegisterRequest",
    "LoginRequest",
    "ChangePasswordRequest",
    "AuthResponse",
    "MeResponse",
    "get_current_session",
    "get_current_user",
    "require_coach",
    "AuthService",
]
