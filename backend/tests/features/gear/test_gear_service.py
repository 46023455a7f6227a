"""
Tests for gear tracking and activity tagging.
"""

from datetime import datetime

import pytest

from app.shared.errors import NotFound, ValidationError
from app.features.activities.models import Activity
from app.features.gear.models import ActivityGear, Gear
from app.features.gear.schemas import GearCreate, GearUpdate
from app.features.gear.service import GearService, usage_percent


@pytest.fixture
def shoes(users, seed):
    return seed(Gear(
        user_id=users.athlete.id, gear_type="SHOES", brand="Hoka", model="Clifton 9", max_distance=500.0,
    ))


@pytest.fixture
def runs(users, seed):
    return seed(
        Activity(user_id=users.athlete.id, name="Easy", date=datetime(2026, 6, 1), distance=10.0, duration=3000),
        Activity(user_id=users.athlete.id, name="Long", date=datetime(2026, 6, 3), distance=20.5, duration=6600),
        Activity(user_id=users.other_athlete.id, name="Not mine", date=datetime(2026, 6, 3), distance=5.0),
    )


class TestUsagePercent:

    @pytest.mark.parametrize("distance, limit, expected", [
        (400.0, 500.0, 80),
        (650.0, 500.0, 100),
        (10.0, None, None),
        (0.0, 800.0, 0),
    ])
    def test_values(self, distance, limit, expected):
        assert usage_percent(distance, limit) == expected


# =============================================================================
# Gear CRUD
# =============================================================================

class TestGearCrud:

    @pytest.mark.asyncio
    async def test_create_is_active(self, db, users):
        gear = await GearService(db).create(
            users.athlete, GearCreate(type="WATCH", brand="Garmin", model="Forerunner 265")
        )
        assert gear.status == "ACTIVE"
        assert gear.gear_type == "WATCH"

    @pytest.mark.asyncio
    async def test_retire_and_reactivate(self, db, users, shoes):
        service = GearService(db)

        retired = await service.update(users.athlete, shoes.id, GearUpdate(status="RETIRED"))
        assert retired.retired_at is not None

        active = await service.update(users.athlete, shoes.id, GearUpdate(status="ACTIVE"))
        assert active.retired_at is None

    @pytest.mark.asyncio
    async def test_update_clears_limit(self, db, users, shoes):
        gear = await GearService(db).update(users.athlete, shoes.id, GearUpdate(max_distance=None, brand=None))
        assert gear.max_distance is None
        assert gear.brand == "Hoka"

    @pytest.mark.asyncio
    async def test_someone_elses_gear(self, db, users, shoes):
        service = GearService(db)
        with pytest.raises(NotFound):
            await service.get(users.other_athlete, shoes.id)
        with pytest.raises(NotFound):
            await service.delete(users.other_athlete, shoes.id)

    @pytest.mark.asyncio
    async def test_list_puts_active_first(self, db, users, seed, shoes, runs):
        seed(
            Gear(user_id=users.athlete.id, gear_type="SHOES", brand="Nike", model="Old", status="RETIRED"),
            ActivityGear(activity_id=runs[0].id, gear_id=shoes.id),
        )

        listed = await GearService(db).list_gear(users.athlete)

        assert [g.model for g in listed] == ["Clifton 9", "Old"]
        assert listed[0].total_distance == 10.0


# =============================================================================
# Tagging and usage
# =============================================================================

class TestAssign:

    @pytest.mark.asyncio
    async def test_usage_is_summed_from_activities(self, db, users, shoes, runs):
        service = GearService(db)
        for run in runs[:2]:
            await service.assign(users.athlete, run.id, shoes.id)

        detail = await service.get(users.athlete, shoes.id)

        assert detail.total_distance == 30.5
        assert detail.total_duration == 9600
        assert detail.total_activities == 2
        assert detail.usage_percent == 6
        assert [a.name for a in detail.recent_activities] == ["Long", "Easy"]

    @pytest.mark.asyncio
    async def test_assign_twice(self, db, users, shoes, runs):
        service = GearService(db)
        await service.assign(users.athlete, runs[0].id, shoes.id)

        with pytest.raises(ValidationError):
            await service.assign(users.athlete, runs[0].id, shoes.id)

        detail = await service.get(users.athlete, shoes.id)
        assert detail.total_activities == 1

    @pytest.mark.asyncio
    async def test_cannot_tag_foreign_activity(self, db, users, shoes, runs):
        with pytest.raises(NotFound):
            await GearService(db).assign(users.athlete, runs[2].id, shoes.id)

    @pytest.mark.asyncio
    async def test_unassign(self, db, users, shoes, runs):
        service = GearService(db)
        await service.assign(users.athlete, runs[0].id, shoes.id)

        await service.unassign(users.athlete, runs[0].id, shoes.id)

        assert (await service.describe(shoes)).total_activities == 0
        with pytest.raises(NotFound):
            await service.unassign(users.athlete, runs[0].id, shoes.id)

    @pytest.mark.asyncio
    async def test_delete_removes_links(self, db, users, shoes, runs):
        service = GearService(db)
        await service.assign(users.athlete, runs[0].id, shoes.id)

        await service.delete(users.athlete, shoes.id)

        assert await service.gear.usage([shoes.id]) == {}
        assert await service.list_gear(users.athlete) == []


class TestAlerts:

    @pytest.mark.asyncio
    async def test_active_gear_near_limit(self, db, users, seed, runs):
        worn, retired, fresh = seed(
            Gear(user_id=users.athlete.id, gear_type="SHOES", brand="Asics", model="Worn", max_distance=12.0),
            Gear(user_id=users.athlete.id, gear_type="SHOES", brand="Asics", model="Retired",
                 max_distance=12.0, status="RETIRED"),
            Gear(user_id=users.athlete.id, gear_type="SHOES", brand="Asics", model="Fresh", max_distance=800.0),
        )
        service = GearService(db)
        for gear in (worn, retired, fresh):
            await service.assign(users.athlete, runs[0].id, gear.id)

        alerts = await service.alerts(users.athlete)

        assert [g.model for g in alerts] == ["Worn"]
        assert alerts[0].usage_percent == 83
        assert not alerts[0].needs_replacement
