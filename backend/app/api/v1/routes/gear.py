"""
Gear endpoints.

Endpoints:
- GET    /gear                                   - Own gear (filter by status, type)
- GET    /gear/alerts                            - Active gear near its distance limit
- GET    /gear/{gear_id}                         - Gear with recent activities
- POST   /gear                                   - Add gear
- PUT    /gear/{gear_id}                         - Update / retire
- DELETE /gear/{gear_id}                         - Delete
- POST   /gear/activity/{activity_id}            - Tag an activity with gear
- DELETE /gear/activity/{activity_id}/{gear_id}  - Untag
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.constants import GearStatus, GearType
from app.shared.schemas import MessageResponse
from app.features.auth import get_current_user
from app.features.gear import GearService
from app.features.gear.schemas import (
    GearAlerts,
    GearAssign,
    GearCreate,
    GearDetailEnvelope,
    GearEnvelope,
    GearList,
    GearUpdate,
)
from app.features.users import User

router = APIRouter(prefix="/gear", tags=["Gear"])


@router.get("", response_model=GearList)
async def list_gear(
    status: Optional[GearStatus] = Query(None),
    gear_type: Optional[GearType] = Query(None, alias="type"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    gear = await GearService(db).list_gear(
        user,
        status=status.value if status else None,
        gear_type=gear_type.value if gear_type else None,
    )
    return GearList(gear=gear)


# Declared before /{gear_id} so "alerts" is not taken for an ID
@router.get("/alerts", response_model=GearAlerts)
async def gear_alerts(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return GearAlerts(alerts=await GearService(db).alerts(user))


@router.get("/{gear_id}", response_model=GearDetailEnvelope)
async def get_gear(
    gear_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return GearDetailEnvelope(gear=await GearService(db).get(user, gear_id))


@router.post("", response_model=GearEnvelope, status_code=201)
async def create_gear(
    data: GearCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    service = GearService(db)
    gear = await service.create(user, data)
    return GearEnvelope(gear=await service.describe(gear))


@router.put("/{gear_id}", response_model=GearEnvelope)
async def update_gear(
    gear_id: str,
    data: GearUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    service = GearService(db)
    gear = await service.update(user, gear_id, data)
    return GearEnvelope(gear=await service.describe(gear))


@router.delete("/{gear_id}", response_model=MessageResponse)
async def delete_gear(
    gear_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await GearService(db).delete(user, gear_id)
    return MessageResponse(message="Gear deleted")


@router.post("/activity/{activity_id}", response_model=GearEnvelope)
async def assign_gear(
    activity_id: str,
    data: GearAssign,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Tag an activity; the gear comes back with updated totals."""
    service = GearService(db)
    gear = await service.assign(user, activity_id, data.gear_id)
    return GearEnvelope(gear=await service.describe(gear))


@router.delete("/activity/{activity_id}/{gear_id}", response_model=GearEnvelope)
async def unassign_gear(
    activity_id: str,
    gear_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    service = GearService(db)
    gear = await service.unassign(user, activity_id, gear_id)
    return GearEnvelope(gear=await service.describe(gear))
