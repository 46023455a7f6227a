"""
Training plan repository.

Session completion is a conditional UPDATE so two writers (e.g. a
manual log and a Strava sync) cannot both claim the same session.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.shared.constants import PlanStatus
from app.shared.repository import BaseRepository
from .models import PlanSession, PlanTemplate, TrainingPlan


class PlanRepository(BaseRepository[TrainingPlan]):
    """Repository for TrainingPlan and PlanSession operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrainingPlan)

    async def get_with_sessions(self, plan_id: str) -> TrainingPlan | None:
        """Plan with a freshly loaded sessions collection."""
        result = await self.db.execute(
            select(TrainingPlan)
            .where(TrainingPlan.id == plan_id)
            .options(selectinload(TrainingPlan.sessions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_plans(
        self,
        coach_id: Optional[str] = None,
        athlete_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[TrainingPlan]:
        conditions = []
        if coach_id is not None:
            conditions.append(TrainingPlan.coach_id == coach_id)
        if athlete_id is not None:
            conditions.append(TrainingPlan.athlete_id == athlete_id)
        if status:
            conditions.append(TrainingPlan.status == status)
        return await self.list(*conditions, order_by=TrainingPlan.start_date.desc())

    async def active_plans(self, athlete_id: str) -> list[TrainingPlan]:
        return await self.list_plans(athlete_id=athlete_id, status=PlanStatus.ACTIVE.value)

    # === Sessions ===

    async def get_session(self, session_id: str) -> PlanSession | None:
        """Session with its plan joined."""
        return await self.db.get(PlanSession, session_id)

    async def add_session(self, plan: TrainingPlan, **values) -> PlanSession:
        session = PlanSession(plan_id=plan.id, **values)
        self.db.add(session)
        await self.db.flush()
        return session

    async def update_session(self, session: PlanSession, **values) -> PlanSession:
        for key, value in values.items():
            setattr(session, key, value)
        await self.db.flush()
        return session

    async def open_sessions_on_day(
        self,
        athlete_id: str,
        day_start: datetime,
        day_end: datetime,
    ) -> list[PlanSession]:
        """
        Sessions of the athlete's ACTIVE plans in [day_start, day_end)
        that are neither completed nor skipped.
        """
        result = await self.db.execute(
            select(PlanSession)
            .join(TrainingPlan, PlanSession.plan_id == TrainingPlan.id)
            .where(
                TrainingPlan.athlete_id == athlete_id,
                TrainingPlan.status == PlanStatus.ACTIVE.value,
                PlanSession.date >= day_start,
                PlanSession.date < day_end,
                PlanSession.completed.is_(False),
                PlanSession.skipped.is_(False),
            )
            .order_by(PlanSession.date)
        )
        return list(result.scalars().unique().all())

    async def complete_session(self, session_id: str) -> bool:
        """
        Mark a session completed unless it already is.

        Returns:
            True if this call completed it
        """
        result = await self.db.execute(
            update(PlanSession)
            .where(
                PlanSession.id == session_id,
                PlanSession.completed.is_(False),
            )
            .values(completed=True, skipped=False)
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1

    async def sessions_in_range(
        self,
        date_from: datetime,
        date_to: datetime,
        coach_id: Optional[str] = None,
        athlete_id: Optional[str] = None,
    ) -> list[PlanSession]:
        query = (
            select(PlanSession)
            .join(TrainingPlan, PlanSession.plan_id == TrainingPlan.id)
            .where(PlanSession.date >= date_from, PlanSession.date <= date_to)
            .order_by(PlanSession.date)
        )
        if coach_id is not None:
            query = query.where(TrainingPlan.coach_id == coach_id)
        if athlete_id is not None:
            query = query.where(TrainingPlan.athlete_id == athlete_id)
        result = await self.db.execute(query)
        return list(result.scalars().unique().all())


class TemplateRepository(BaseRepository[PlanTemplate]):
    """Repository for a coach's plan templates."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, PlanTemplate)

    async def get_with_sessions(self, template_id: str) -> PlanTemplate | None:
        result = await self.db.execute(
            select(PlanTemplate)
            .where(PlanTemplate.id == template_id)
            .options(selectinload(PlanTemplate.sessions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def for_coach(self, coach_id: str) -> list[PlanTemplate]:
        return await self.list(PlanTemplate.coach_id == coach_id, order_by=PlanTemplate.name)
