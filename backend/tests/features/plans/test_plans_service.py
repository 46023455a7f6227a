"""
Tests for training plans, session status and the calendar.
"""

from datetime import datetime, timedelta

import pytest

from app.shared.dates import utcnow
from app.shared.errors import NotFound, ValidationError
from app.features.plans.models import PlanSession, TrainingPlan
from app.features.plans.schemas import PlanUpdate, SessionStatusUpdate
from app.features.plans.service import PlanService, plan_stats


@pytest.fixture
def plan(users, seed):
    start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    return seed(TrainingPlan(
        coach_id=users.coach.id,
        athlete_id=users.athlete.id,
        name="Marathon block",
        start_date=start - timedelta(days=7),
        end_date=start + timedelta(days=60),
        sessions=[
            PlanSession(date=start - timedelta(days=2), session_type="EASY", title="Past easy"),
            PlanSession(date=start + timedelta(days=1), session_type="TEMPO", title="Tempo"),
            PlanSession(date=start + timedelta(days=3), session_type="LONG_RUN", title="Long run"),
        ],
    ))


def session_id(plan, title) -> str:
    return next(s.id for s in plan.sessions if s.title == title)


class TestPlanStats:

    def test_empty(self):
        stats = plan_stats([])
        assert (stats.completed_sessions, stats.total_sessions, stats.completion_rate) == (0, 0, 0)

    def test_rounding(self):
        sessions = [PlanSession(completed=True), PlanSession(completed=False), PlanSession(completed=False)]
        assert plan_stats(sessions).completion_rate == 33


# =============================================================================
# Session status
# =============================================================================

class TestUpdateSession:

    @pytest.mark.asyncio
    async def test_skip_clears_completed(self, db, users, hub, plan):
        service = PlanService(db, hub)
        target = session_id(plan, "Tempo")

        await service.update_session(users.athlete, target, SessionStatusUpdate(completed=True))
        session = await service.update_session(users.athlete, target, SessionStatusUpdate(skipped=True))

        assert session.skipped
        assert not session.completed
        events = hub.sent_to(users.coach.id, "notification:new")
        assert [e["type"] for e in events] == ["SESSION_COMPLETED", "SESSION_SKIPPED"]

    @pytest.mark.asyncio
    async def test_coach_update_does_not_notify(self, db, users, hub, plan):
        await PlanService(db, hub).update_session(
            users.coach, session_id(plan, "Tempo"), SessionStatusUpdate(completed=True)
        )
        assert hub.events == []

    @pytest.mark.asyncio
    async def test_repeated_completion_notifies_once(self, db, users, hub, plan):
        service = PlanService(db, hub)
        target = session_id(plan, "Tempo")

        await service.update_session(users.athlete, target, SessionStatusUpdate(completed=True))
        await service.update_session(users.athlete, target, SessionStatusUpdate(completed=True))

        assert len(hub.sent_to(users.coach.id)) == 1

    @pytest.mark.asyncio
    async def test_unknown_session(self, db, users, plan):
        with pytest.raises(NotFound):
            await PlanService(db).update_session(users.athlete, "missing", SessionStatusUpdate(completed=True))


# =============================================================================
# Plan management
# =============================================================================

class TestPlanManagement:

    @pytest.mark.asyncio
    async def test_end_before_start(self, db, users, plan):
        with pytest.raises(ValidationError):
            await PlanService(db).update_plan(
                users.coach, plan.id, PlanUpdate(end_date=plan.start_date - timedelta(days=1))
            )

    @pytest.mark.asyncio
    async def test_foreign_coach_cannot_update(self, db, users, plan):
        with pytest.raises(NotFound):
            await PlanService(db).update_plan(users.other_coach, plan.id, PlanUpdate(name="Mine now"))

    @pytest.mark.asyncio
    async def test_upcoming_skips_past_and_done(self, db, users, plan):
        service = PlanService(db)
        await service.update_session(users.athlete, session_id(plan, "Tempo"), SessionStatusUpdate(completed=True))

        [active] = await service.upcoming_for_athlete(users.athlete.id)

        assert [s.title for s in active.upcoming_sessions] == ["Long run"]


# =============================================================================
# Calendar
# =============================================================================

class TestCalendar:

    @pytest.mark.asyncio
    async def test_coach_and_athlete_see_same_sessions(self, db, users, plan):
        service = PlanService(db)
        start, end = plan.start_date, plan.end_date

        coach_view = await service.calendar(users.coach, start, end)
        athlete_view = await service.calendar(users.athlete, start, end)

        assert [s.id for s in coach_view] == [s.id for s in athlete_view]
        assert len(coach_view) == 3

    @pytest.mark.asyncio
    async def test_other_coach_sees_nothing(self, db, users, plan):
        assert await PlanService(db).calendar(users.other_coach, plan.start_date, plan.end_date) == []

    @pytest.mark.asyncio
    async def test_range_limit(self, db, users):
        start = datetime(2026, 1, 1)
        with pytest.raises(ValidationError):
            await PlanService(db).calendar(users.athlete, start, start + timedelta(days=400))
