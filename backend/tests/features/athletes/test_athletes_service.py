"""
Tests for the coach's athlete roster.
"""

from datetime import timedelta

import pytest

from app.shared.dates import utcnow
from app.shared.errors import NotFound
from app.features.activities.models import Activity
from app.features.athletes.service import AthleteService
from app.features.strava.models import StravaToken


def run(user_id, days_ago, distance=10.0, duration=3000, avg_pace=300.0) -> Activity:
    return Activity(
        user_id=user_id,
        name=f"Run {days_ago}d ago",
        date=utcnow() - timedelta(days=days_ago),
        distance=distance,
        duration=duration,
        avg_pace=avg_pace,
        avg_heart_rate=150,
    )


class TestRoster:

    @pytest.mark.asyncio
    async def test_weekly_totals(self, db, users, seed):
        seed(
            run(users.athlete.id, 1, distance=10.0, duration=3000, avg_pace=300.0),
            run(users.athlete.id, 3, distance=5.0, duration=1800, avg_pace=360.0),
            run(users.athlete.id, 20),
        )

        [entry] = await AthleteService(db).roster(users.coach)

        assert entry.week.workouts == 2
        assert entry.week.distance == 15.0
        assert entry.week.duration == 4800
        assert entry.week.avg_pace == 330.0
        assert entry.days_since_last_activity == 1

    @pytest.mark.asyncio
    async def test_idle_athlete(self, db, users):
        [entry] = await AthleteService(db).roster(users.coach)

        assert entry.last_activity_date is None
        assert entry.days_since_last_activity is None
        assert entry.week.workouts == 0
        assert entry.week.avg_pace is None

    @pytest.mark.asyncio
    async def test_strava_flag(self, db, users, seed):
        seed(StravaToken(
            user_id=users.athlete.id,
            strava_athlete_id="111",
            access_token="a",
            refresh_token="r",
            expires_at=utcnow(),
        ))

        [entry] = await AthleteService(db).roster(users.coach)

        assert entry.strava_connected


class TestDetail:

    @pytest.mark.asyncio
    async def test_athlete_sees_own_detail(self, db, users, seed):
        seed(run(users.athlete.id, 2), run(users.athlete.id, 15))

        detail = await AthleteService(db).detail(users.athlete, users.athlete.id)

        assert detail.stats.last_7_days.workouts == 1
        assert detail.stats.last_30_days.workouts == 2
        assert len(detail.recent_activities) == 2

    @pytest.mark.asyncio
    async def test_unknown_athlete(self, db, users):
        with pytest.raises(NotFound):
            await AthleteService(db).detail(users.coach, "missing")
