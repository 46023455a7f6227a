"""
Athlete roster endpoints (coach view).

Endpoints:
- GET    /athletes               - Coach's roster with weekly totals
- GET    /athletes/{athlete_id}  - Athlete detail (coach or the athlete)
- DELETE /athletes/{athlete_id}  - Unlink athlete from coach
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.schemas import MessageResponse
from app.features.auth import get_current_user, require_coach
from app.features.athletes import AthleteDetailEnvelope, AthleteService, RosterResponse
from app.features.users import User

router = APIRouter(prefix="/athletes", tags=["Athletes"])


@router.get("", response_model=RosterResponse)
async def list_athletes(
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    return RosterResponse(athletes=await AthleteService(db).roster(coach))


@router.get("/{athlete_id}", response_model=AthleteDetailEnvelope)
async def get_athlete(
    athlete_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Athlete detail: 30/7-day stats, 10 most recent activities and
    active plans with their upcoming sessions.
    """
    return AthleteDetailEnvelope(athlete=await AthleteService(db).detail(user, athlete_id))


@router.delete("/{athlete_id}", response_model=MessageResponse)
async def remove_athlete(
    athlete_id: str,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Remove an athlete from the roster.

    The athlete's data stays; only the coach link is cleared.
    """
    await AthleteService(db).remove(coach, athlete_id)
    return MessageResponse(message="Athlete removed")
