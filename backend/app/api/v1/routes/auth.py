"""
Authentication endpoints.

Endpoints:
- POST /auth/register         - Create account (optionally with invitation code)
- POST /auth/login            - Exchange credentials for a session token
- GET  /auth/me               - Current user
- POST /auth/change-password  - Change password
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.schemas import MessageResponse
from app.features.auth import (
    AuthResponse,
    AuthService,
    ChangePasswordRequest,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    get_current_user,
)
from app.features.users import User

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Register a coach or an athlete.

    Athletes registering with an invitation code are attached to the
    inviting coach.
    """
    service = AuthService(db)
    user, token = await service.register(data)
    return AuthResponse(
        message="User registered successfully",
        user=await service.describe(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_db)
):
    service = AuthService(db)
    user, token = await service.login(data.email, data.password)
    return AuthResponse(
        message="Login successful",
        user=await service.describe(user),
        token=token,
    )


@router.get("/me", response_model=MeResponse)
async def me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return MeResponse(user=await AuthService(db).describe(user))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await AuthService(db).change_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")
