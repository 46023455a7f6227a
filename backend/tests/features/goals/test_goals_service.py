"""
Tests for personal goals, milestone notifications and historical stats.

The clock is pinned to Wednesday 2026-06-10 12:00 UTC.
"""

from datetime import datetime

import pytest

from app.shared.errors import NotFound
from app.features.activities.models import Activity
from app.features.goals import service as goals_module
from app.features.goals.models import Goal
from app.features.goals.schemas import GoalCreate, GoalUpdate
from app.features.goals.service import GoalService, days_remaining, goal_window, progress_percent

NOW = datetime(2026, 6, 10, 12)


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch):
    monkeypatch.setattr(goals_module, "utcnow", lambda: NOW)


def run(user, day: datetime, distance=5.0, duration=1800, elevation=30) -> Activity:
    return Activity(
        user_id=user.id, name="Run", date=day, distance=distance, duration=duration, elevation_gain=elevation
    )


def monthly_distance(target: float, **extra) -> GoalCreate:
    return GoalCreate(type="DISTANCE", period="MONTHLY", title="June volume", target_value=target, **extra)


class TestGoalWindow:

    @pytest.mark.parametrize("period, start, end", [
        ("WEEKLY", datetime(2026, 6, 8), datetime(2026, 6, 15)),
        ("MONTHLY", datetime(2026, 6, 1), datetime(2026, 7, 1)),
        ("YEARLY", datetime(2026, 1, 1), datetime(2027, 1, 1)),
    ])
    def test_calendar_periods(self, period, start, end):
        assert goal_window(period, NOW) == (start, end)

    def test_custom_end_day_is_inclusive(self):
        window = goal_window("CUSTOM", NOW, datetime(2026, 6, 1, 9), datetime(2026, 6, 20, 9))
        assert window == (datetime(2026, 6, 1), datetime(2026, 6, 21))

    def test_progress_and_days_left(self):
        assert progress_percent(30.0, 20.0) == 100
        assert progress_percent(5.0, 20.0) == 25
        assert days_remaining(datetime(2026, 6, 15), NOW) == 5
        assert days_remaining(datetime(2026, 6, 1), NOW) == 0


# =============================================================================
# Progress
# =============================================================================

class TestProgress:

    @pytest.mark.asyncio
    async def test_existing_activities_count_on_create(self, db, users, seed, hub):
        seed(
            run(users.athlete, datetime(2026, 6, 2), distance=8.0),
            run(users.athlete, datetime(2026, 5, 31), distance=50.0),
        )

        goal = await GoalService(db, hub).create(users.athlete, monthly_distance(20.0))

        assert goal.current_value == 8.0
        assert goal.status == "ACTIVE"
        assert goal.last_milestone == 0

    @pytest.mark.asyncio
    async def test_met_on_create_completes_quietly(self, db, users, seed, hub):
        seed(run(users.athlete, datetime(2026, 6, 2), distance=25.0))

        goal = await GoalService(db, hub).create(users.athlete, monthly_distance(20.0))

        assert goal.status == "COMPLETED"
        assert goal.completed_at == NOW
        assert hub.events == []

    @pytest.mark.asyncio
    async def test_milestones_announce_highest_only(self, db, users, seed, hub):
        service = GoalService(db, hub)
        goal = await service.create(users.athlete, monthly_distance(20.0))

        seed(run(users.athlete, datetime(2026, 6, 3), distance=11.0))
        await service.refresh_progress(users.athlete.id)
        await db.commit()

        seed(run(users.athlete, datetime(2026, 6, 4), distance=10.0))
        await service.refresh_progress(users.athlete.id)
        await db.commit()

        events = hub.sent_to(users.athlete.id, "notification:new")
        assert [(e["type"], e["title"]) for e in events] == [
            ("GOAL_MILESTONE", "Goal 50% done"),
            ("GOAL_COMPLETED", "Goal reached"),
        ]
        assert goal.status == "COMPLETED"
        assert goal.last_milestone == 100

    @pytest.mark.asyncio
    async def test_disabled_milestone_is_silent(self, db, users, seed, hub):
        service = GoalService(db, hub)
        await service.create(users.athlete, monthly_distance(20.0, notify_at_50=False))

        seed(run(users.athlete, datetime(2026, 6, 3), distance=11.0))
        await service.refresh_progress(users.athlete.id)

        assert hub.events == []

    @pytest.mark.asyncio
    async def test_passed_window_fails(self, db, users, seed):
        goal = seed(Goal(
            user_id=users.athlete.id, goal_type="WORKOUTS", period="WEEKLY", title="3 runs",
            target_value=3, start_date=datetime(2026, 6, 1), end_date=datetime(2026, 6, 8),
        ))

        [listed] = await GoalService(db).list_goals(users.athlete, include_completed=True)

        assert listed.id == goal.id
        assert listed.status == "FAILED"
        assert listed.days_remaining == 0

    @pytest.mark.asyncio
    async def test_duration_in_hours(self, db, users, seed):
        seed(run(users.athlete, datetime(2026, 6, 9), duration=5400))

        goal = await GoalService(db).create(
            users.athlete,
            GoalCreate(type="DURATION", period="WEEKLY", title="Hours", target_value=5),
        )

        assert goal.current_value == 1.5

    @pytest.mark.asyncio
    async def test_streak(self, db, users, seed):
        seed(
            run(users.athlete, datetime(2026, 6, 9, 7)),
            run(users.athlete, datetime(2026, 6, 8, 18)),
            run(users.athlete, datetime(2026, 6, 6, 7)),
        )

        goal = await GoalService(db).create(
            users.athlete,
            GoalCreate(type="STREAK", period="MONTHLY", title="Keep going", target_value=7),
        )

        assert goal.current_value == 2.0


# =============================================================================
# CRUD
# =============================================================================

class TestGoalCrud:

    @pytest.mark.asyncio
    async def test_list_defaults_to_active(self, db, users, seed):
        seed(run(users.athlete, datetime(2026, 6, 2), distance=25.0))
        service = GoalService(db)
        await service.create(users.athlete, monthly_distance(20.0))
        await service.create(users.athlete, monthly_distance(100.0))

        active = await service.list_goals(users.athlete)
        everything = await service.list_goals(users.athlete, include_completed=True)
        completed = await service.list_goals(users.athlete, status="COMPLETED")

        assert [g.target_value for g in active] == [100.0]
        assert len(everything) == 2
        assert [g.progress_percent for g in completed] == [100]

    @pytest.mark.asyncio
    async def test_raising_target_is_remeasured(self, db, users, seed):
        seed(run(users.athlete, datetime(2026, 6, 2), distance=10.0))
        service = GoalService(db)
        goal = await service.create(users.athlete, monthly_distance(40.0))

        updated = await service.update(users.athlete, goal.id, GoalUpdate(target_value=8.0))

        assert updated.status == "COMPLETED"

    @pytest.mark.asyncio
    async def test_other_users_goal(self, db, users):
        service = GoalService(db)
        goal = await service.create(users.athlete, monthly_distance(40.0))

        with pytest.raises(NotFound):
            await service.update(users.other_athlete, goal.id, GoalUpdate(title="Mine"))
        with pytest.raises(NotFound):
            await service.delete(users.other_athlete, goal.id)

        await service.delete(users.athlete, goal.id)
        assert await service.list_goals(users.athlete) == []


# =============================================================================
# Historical stats
# =============================================================================

class TestHistorical:

    @pytest.mark.asyncio
    async def test_months_weeks_and_comparison(self, db, users, seed):
        seed(
            run(users.athlete, datetime(2026, 5, 12), distance=10.0),
            run(users.athlete, datetime(2026, 6, 2), distance=12.0),
            run(users.athlete, datetime(2026, 6, 9), distance=3.0),
            run(users.other_athlete, datetime(2026, 6, 9), distance=42.0),
        )

        stats = await GoalService(db).historical(users.athlete, months=3)

        assert [(m.label, m.distance) for m in stats.monthly] == [("Apr", 0.0), ("May", 10.0), ("Jun", 15.0)]
        assert [w.start_date.isoformat() for w in stats.weekly] == [
            "2026-05-18", "2026-05-25", "2026-06-01", "2026-06-08",
        ]
        assert [w.distance for w in stats.weekly] == [0.0, 0.0, 12.0, 3.0]
        assert stats.comparison.distance == 50
        assert stats.comparison.workouts == 100

    @pytest.mark.asyncio
    async def test_single_month_still_compares(self, db, users, seed):
        seed(run(users.athlete, datetime(2026, 5, 12), distance=10.0))

        stats = await GoalService(db).historical(users.athlete, months=1)

        assert [m.month for m in stats.monthly] == [6]
        assert stats.comparison.distance == -100
