"""
Training Plan Service.

Coaches create plans for their athletes; athletes (and their coaches)
mark sessions completed or skipped. A plan is visible only to its coach
and its athlete; everyone else gets NotFound.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import NotificationType
from app.shared.dates import utcnow
from app.shared.errors import NotFound, ValidationError
from app.features.access.policy import AccessPolicy
from app.features.activities.repository import ActivityRepository
from app.features.activities.schemas import ActivityBrief
from app.features.notifications.service import NotificationService
from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.features.users.schemas import UserSummary
from .models import PlanSession, TrainingPlan
from .repository import PlanRepository
from .schemas import (
    CalendarSession,
    PlanCreate,
    PlanDuplicate,
    PlanDetail,
    PlanDetailBody,
    PlanResponse,
    PlanStats,
    PlanUpdate,
    SessionCreate,
    SessionDetail,
    SessionResponse,
    SessionStatusUpdate,
)

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

PLAN_NOT_FOUND = "Plan not found"
SESSION_NOT_FOUND = "Session not found"
MAX_CALENDAR_DAYS = 366
UPCOMING_PREVIEW = 3


# Columns a copied or templated session carries over
PLANNED_FIELDS = (
    "session_type", "title", "description", "target_distance", "target_duration", "target_pace",
)


def planned_fields(session) -> dict:
    """What was planned, without date or completion state."""
    return {name: getattr(session, name) for name in PLANNED_FIELDS}


def plan_stats(sessions: list[PlanSession]) -> PlanStats:
    total = len(sessions)
    completed = sum(1 for s in sessions if s.completed)
    rate = round(completed / total * 100) if total else 0
    return PlanStats(completed_sessions=completed, total_sessions=total, completion_rate=rate)


class PlanService:
    """Plan and session operations."""

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.plans = PlanRepository(db)
        self.users = UserRepository(db)
        self.policy = AccessPolicy(db)
        self.notifier = NotificationService(db, hub)

    async def _summary(self, user_id: str) -> Optional[UserSummary]:
        user = await self.users.get_by_id(user_id)
        return UserSummary.model_validate(user) if user else None

    async def to_response(self, plan: TrainingPlan) -> PlanResponse:
        response = PlanResponse.model_validate(plan)
        response.athlete = await self._summary(plan.athlete_id)
        response.coach = await self._summary(plan.coach_id)
        response.session_count = len(plan.sessions)
        response.upcoming_sessions = [
            SessionResponse.model_validate(s)
            for s in plan.sessions if not s.completed
        ][:UPCOMING_PREVIEW]
        return response

    async def _get_visible(self, user: User, plan_id: str) -> TrainingPlan:
        plan = await self.plans.get_with_sessions(plan_id)
        if plan is None or user.id not in (plan.coach_id, plan.athlete_id):
            raise NotFound(PLAN_NOT_FOUND)
        return plan

    async def _get_coached(self, coach: User, plan_id: str) -> TrainingPlan:
        plan = await self.plans.get_with_sessions(plan_id)
        if plan is None or plan.coach_id != coach.id:
            raise NotFound(PLAN_NOT_FOUND)
        return plan

    async def _get_session(self, session_id: str) -> PlanSession:
        session = await self.plans.get_session(session_id)
        if session is None:
            raise NotFound(SESSION_NOT_FOUND)
        return session

    # === Plans ===

    async def list_plans(
        self,
        user: User,
        athlete_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[PlanResponse]:
        """Coach: own plans (optionally one athlete). Athlete: assigned plans."""
        if user.is_coach:
            plans = await self.plans.list_plans(coach_id=user.id, athlete_id=athlete_id, status=status)
        else:
            plans = await self.plans.list_plans(athlete_id=user.id, status=status)
        return [await self.to_response(plan) for plan in plans]

    async def get_plan(self, user: User, plan_id: str) -> PlanDetail:
        plan = await self._get_visible(user, plan_id)

        linked = await ActivityRepository(self.db).linked_to_sessions([s.id for s in plan.sessions])
        by_session: dict[str, list[ActivityBrief]] = {}
        for activity in linked:
            by_session.setdefault(activity.plan_session_id, []).append(
                ActivityBrief.model_validate(activity)
            )

        base = await self.to_response(plan)
        body = PlanDetailBody(
            **base.model_dump(),
            sessions=[
                SessionDetail(
                    **SessionResponse.model_validate(s).model_dump(),
                    activities=by_session.get(s.id, []),
                )
                for s in plan.sessions
            ],
        )
        return PlanDetail(plan=body, stats=plan_stats(plan.sessions))

    async def assign_plan(
        self,
        coach: User,
        athlete_id: str,
        name: str,
        start_date: datetime,
        end_date: datetime,
        sessions: list[PlanSession],
        description: Optional[str] = None,
    ) -> TrainingPlan:
        """
        Persist a plan for one of the coach's athletes and notify them.

        Raises:
            Forbidden: The athlete is not coached by the caller
        """
        await self.policy.ensure_coach_of(coach, athlete_id)

        plan = await self.plans.create(
            coach_id=coach.id,
            athlete_id=athlete_id,
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            sessions=sessions,
        )

        await self.notifier.create_and_send(
            athlete_id,
            NotificationType.PLAN_ASSIGNED,
            "New training plan",
            f"{coach.name} assigned you the plan \"{plan.name}\"",
            from_user_id=coach.id,
            plan_id=plan.id,
        )
        await self.db.commit()
        logger.info(f"Coach {coach.id} created plan {plan.id} for {athlete_id} "
                    f"with {len(sessions)} sessions")
        return await self.plans.get_with_sessions(plan.id)

    async def create_plan(self, coach: User, data: PlanCreate) -> TrainingPlan:
        """Assign a new plan to one of the coach's athletes."""
        return await self.assign_plan(
            coach,
            data.athlete_id,
            data.name,
            data.start_date,
            data.end_date,
            [PlanSession(**s.model_dump()) for s in data.sessions],
            description=data.description,
        )

    async def duplicate_plan(self, coach: User, plan_id: str, data: PlanDuplicate) -> TrainingPlan:
        """
        Copy one of the coach's plans onto an athlete from a new start date.

        Sessions keep their distance from the plan start; completion
        state, notes and feedback are not copied.

        Raises:
            NotFound: Plan unknown or not the caller's
            Forbidden: Target athlete is not coached by the caller
        """
        source = await self._get_coached(coach, plan_id)
        shift = data.start_date - source.start_date
        return await self.assign_plan(
            coach,
            data.target_athlete_id,
            data.new_name or f"{source.name} (copy)",
            data.start_date,
            source.end_date + shift,
            [PlanSession(date=s.date + shift, **planned_fields(s)) for s in source.sessions],
            description=source.description,
        )

    async def update_plan(self, coach: User, plan_id: str, data: PlanUpdate) -> TrainingPlan:
        plan = await self._get_coached(coach, plan_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items()
                   if v is not None or k == "description"}
        if changes.get("end_date") is not None and changes["end_date"] < plan.start_date:
            raise ValidationError("endDate must not be before startDate",
                                  {"endDate": ["Must not be before startDate"]})
        await self.plans.update(plan, **changes)
        await self.db.commit()
        return plan

    async def delete_plan(self, coach: User, plan_id: str) -> None:
        plan = await self._get_coached(coach, plan_id)
        await self.plans.delete(plan)
        await self.db.commit()
        logger.info(f"Coach {coach.id} deleted plan {plan_id}")

    # === Sessions ===

    async def add_session(self, coach: User, plan_id: str, data: SessionCreate) -> PlanSession:
        plan = await self._get_coached(coach, plan_id)
        session = await self.plans.add_session(plan, **data.model_dump())
        await self.db.commit()
        return session

    async def update_session(
        self,
        user: User,
        session_id: str,
        data: SessionStatusUpdate,
    ) -> PlanSession:
        """
        Mark a session completed/skipped or add athlete notes.

        Allowed for the plan's athlete and coach. When the athlete flips
        a flag on, the coach is notified.
        """
        session = await self._get_session(session_id)
        plan = session.plan
        if user.id not in (plan.athlete_id, plan.coach_id):
            raise NotFound(SESSION_NOT_FOUND)

        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "athlete_notes"
        }
        newly_completed = changes.get("completed") is True and not session.completed
        newly_skipped = changes.get("skipped") is True and not session.skipped
        if newly_completed:
            changes.setdefault("skipped", False)
        if newly_skipped:
            changes.setdefault("completed", False)

        await self.plans.update_session(session, **changes)

        if user.id == plan.athlete_id and (newly_completed or newly_skipped):
            verb = "completed" if newly_completed else "skipped"
            await self.notifier.create_and_send(
                plan.coach_id,
                NotificationType.SESSION_COMPLETED if newly_completed else NotificationType.SESSION_SKIPPED,
                f"Session {verb}",
                f"{user.name} {verb} \"{session.title}\"",
                from_user_id=user.id,
                plan_id=plan.id,
                session_id=session.id,
            )

        await self.db.commit()
        return session

    async def session_feedback(self, coach: User, session_id: str, feedback: str) -> PlanSession:
        session = await self._get_session(session_id)
        plan = session.plan
        if plan.coach_id != coach.id:
            raise NotFound(SESSION_NOT_FOUND)

        await self.plans.update_session(session, coach_feedback=feedback)
        await self.notifier.create_and_send(
            plan.athlete_id,
            NotificationType.COACH_FEEDBACK,
            "New feedback from your coach",
            f"{coach.name} commented on \"{session.title}\"",
            from_user_id=coach.id,
            plan_id=plan.id,
            session_id=session.id,
        )
        await self.db.commit()
        return session

    # === Calendar ===

    async def calendar(
        self,
        user: User,
        date_from: datetime,
        date_to: datetime,
        athlete_id: Optional[str] = None,
    ) -> list[CalendarSession]:
        """
        Planned sessions in [date_from, date_to].

        Raises:
            ValidationError: Inverted or oversized range
        """
        if date_to < date_from:
            raise ValidationError("'to' must not be before 'from'")
        if date_to - date_from > timedelta(days=MAX_CALENDAR_DAYS):
            raise ValidationError(f"Range is limited to {MAX_CALENDAR_DAYS} days")

        if user.is_coach:
            sessions = await self.plans.sessions_in_range(
                date_from, date_to, coach_id=user.id, athlete_id=athlete_id
            )
        else:
            sessions = await self.plans.sessions_in_range(date_from, date_to, athlete_id=user.id)

        return [
            CalendarSession(
                **SessionResponse.model_validate(s).model_dump(),
                plan_name=s.plan.name,
                athlete_id=s.plan.athlete_id,
            )
            for s in sessions
        ]

    async def upcoming_for_athlete(self, athlete_id: str, limit: int = 5) -> list[PlanResponse]:
        """Active plans of an athlete with their next open sessions."""
        now = utcnow()
        responses = []
        for plan in await self.plans.active_plans(athlete_id):
            response = await self.to_response(plan)
            response.upcoming_sessions = [
                SessionResponse.model_validate(s)
                for s in plan.sessions
                if s.is_open and s.date >= now
            ][:limit]
            responses.append(response)
        return responses
