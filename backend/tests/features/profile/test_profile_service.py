"""
Tests for the extended profile and heart-rate zones.
"""

from datetime import datetime

import pytest

from app.shared.errors import ValidationError
from app.features.activities.models import Activity
from app.features.gear.models import Gear
from app.features.profile.schemas import HrZonesRequest, ProfileDetailsUpdate
from app.features.profile.service import ProfileService, karvonen_zones

from tests.helpers import load_user


class TestKarvonenZones:

    def test_with_resting_rate(self):
        zones = karvonen_zones(190, 60)
        assert [zones.hr_zone1, zones.hr_zone2, zones.hr_zone3, zones.hr_zone4, zones.hr_zone5] == [
            125, 138, 151, 164, 177,
        ]

    def test_default_resting_rate(self):
        zones = karvonen_zones(200)
        assert zones.hr_rest == 60
        assert zones.hr_zone1 == 130
        assert zones.hr_zone5 == 186

    def test_rest_not_below_max(self):
        with pytest.raises(ValidationError):
            karvonen_zones(120, 120)


# =============================================================================
# Profile
# =============================================================================

class TestProfile:

    @pytest.mark.asyncio
    async def test_counts_and_totals(self, db, users, seed):
        seed(
            Activity(user_id=users.athlete.id, name="Easy", date=datetime(2026, 6, 1), distance=8.0, duration=2700),
            Activity(user_id=users.athlete.id, name="Long", date=datetime(2026, 6, 7), distance=18.0, duration=6300),
            Gear(user_id=users.athlete.id, gear_type="SHOES", brand="Saucony", model="Ride 17"),
        )
        user = await load_user(db, users.athlete.id)

        profile = await ProfileService(db).get(user)

        assert profile.email == users.athlete.email
        assert profile.coach.name == "Coach Carter"
        assert profile.counts.activities == 2
        assert profile.counts.gear == 1
        assert profile.counts.goals == 0
        assert profile.total_stats.distance == 26.0
        assert profile.strava_connected is False

    @pytest.mark.asyncio
    async def test_update_details(self, db, users):
        user = await load_user(db, users.athlete.id)
        service = ProfileService(db)

        await service.update(user, ProfileDetailsUpdate(weight=61.5, gender="FEMALE", location="Lisbon"))
        await service.update(user, ProfileDetailsUpdate(name=None, location=None))

        profile = await service.get(user)
        assert profile.name == "Alice Runner"
        assert profile.weight == 61.5
        assert profile.gender == "FEMALE"
        assert profile.location is None

    @pytest.mark.asyncio
    async def test_hr_zones_are_stored(self, db, users):
        user = await load_user(db, users.athlete.id)
        service = ProfileService(db)

        zones = await service.set_hr_zones(user, HrZonesRequest(hr_max=190, hr_rest=60))
        profile = await service.get(user)

        assert zones.hr_zone3 == 151
        assert (profile.hr_max, profile.hr_rest, profile.hr_zone5) == (190, 60, 177)
