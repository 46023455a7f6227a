"""
User endpoints.

Endpoints:
- PUT /users/profile    - Update own name / avatar
- GET /users/dashboard  - Home screen of the current user
- GET /users/{user_id}  - Public profile of any user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.auth import AuthService, MeResponse, get_current_user
from app.features.dashboard import Dashboard, DashboardService
from app.features.users import ProfileUpdate, PublicProfile, User, UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.put("/profile", response_model=MeResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Update the current user's profile. Omitted fields are left unchanged."""
    user = await UserService(db).update_profile(user, data)
    return MeResponse(user=await AuthService(db).describe(user))


# Declared before /{user_id} so "dashboard" is not taken for an ID
@router.get("/dashboard", response_model=Dashboard)
async def dashboard(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Weekly and monthly totals, streak, recent activities and the active plan."""
    return await DashboardService(db).build(user)


@router.get("/{user_id}", response_model=PublicProfile)
async def get_user(
    user_id: str,
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return await UserService(db).get_public_profile(user_id)
