"""
Profile Service.

The signed-in user's extended profile: body data, heart-rate settings
and lifetime totals. Zones follow the Karvonen formula.
"""

import logging
from dataclasses import asdict
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import ValidationError
from app.features.activities.repository import ActivityRepository
from app.features.athletes.schemas import PeriodTotals
from app.features.auth.service import AuthService
from app.features.gear.repository import GearRepository
from app.features.goals.repository import GoalRepository
from app.features.strava.repository import StravaTokenRepository
from app.features.users.models import User
from app.features.users.repository import UserRepository
from .schemas import HrZones, HrZonesRequest, ProfileCounts, ProfileDetail, ProfileDetailsUpdate

logger = logging.getLogger(__name__)

DEFAULT_REST_HR = 60
ZONE_INTENSITIES = (0.5, 0.6, 0.7, 0.8, 0.9)

# User columns shown on the profile beyond UserResponse
PROFILE_COLUMNS = (
    "birth_date", "gender", "weight", "height", "bio", "location",
    "hr_max", "hr_rest", "hr_zone1", "hr_zone2", "hr_zone3", "hr_zone4", "hr_zone5",
)


def karvonen_zones(hr_max: int, hr_rest: Optional[int] = None) -> HrZones:
    """Zone k starts at rest + reserve * intensity_k."""
    rest = hr_rest or DEFAULT_REST_HR
    if rest >= hr_max:
        raise ValidationError("Resting heart rate must be below maximum",
                              {"hrRest": ["Must be below hrMax"]})
    reserve = hr_max - rest
    bounds = [round(rest + reserve * intensity) for intensity in ZONE_INTENSITIES]
    return HrZones(
        hr_max=hr_max,
        hr_rest=rest,
        **{f"hr_zone{k}": bound for k, bound in enumerate(bounds, start=1)},
    )


class ProfileService:
    """Read and edit the caller's own profile."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def get(self, user: User) -> ProfileDetail:
        activities = ActivityRepository(self.db)
        totals = await activities.totals(user.id)

        profile = ProfileDetail(
            **(await AuthService(self.db).describe(user)).model_dump(),
            **{field: getattr(user, field) for field in PROFILE_COLUMNS},
        )
        profile.strava_connected = await StravaTokenRepository(self.db).exists(user_id=user.id)
        profile.counts = ProfileCounts(
            activities=totals.workouts,
            goals=await GoalRepository(self.db).count_for_user(user.id),
            gear=await GearRepository(self.db).count_for_user(user.id),
        )
        profile.total_stats = PeriodTotals(**asdict(totals))
        return profile

    async def update(self, user: User, data: ProfileDetailsUpdate) -> User:
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key != "name"
        }
        if changes:
            await self.users.update(user, **changes)
            await self.db.commit()
            logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
        return user

    async def set_hr_zones(self, user: User, data: HrZonesRequest) -> HrZones:
        """Compute zones from max (and resting) heart rate and store them."""
        zones = karvonen_zones(data.hr_max, data.hr_rest)
        await self.users.update(user, **zones.model_dump())
        await self.db.commit()
        return zones
