"""
Extended profile endpoints.

Endpoints:
- GET  /profile            - Own profile with totals and counts
- PUT  /profile            - Update profile details
- POST /profile/hr-zones   - Compute and store heart-rate zones
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.auth import get_current_user
from app.features.profile import ProfileService
from app.features.profile.schemas import (
    HrZonesRequest,
    HrZonesResponse,
    ProfileDetailsUpdate,
    ProfileEnvelope,
)
from app.features.users import User

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileEnvelope)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return ProfileEnvelope(profile=await ProfileService(db).get(user))


@router.put("", response_model=ProfileEnvelope)
async def update_profile(
    data: ProfileDetailsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    service = ProfileService(db)
    user = await service.update(user, data)
    return ProfileEnvelope(profile=await service.get(user))


@router.post("/hr-zones", response_model=HrZonesResponse)
async def hr_zones(
    data: HrZonesRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Karvonen zones from max heart rate and resting heart rate (default 60)."""
    return HrZonesResponse(zones=await ProfileService(db).set_hr_zones(user, data))
