"""
Plan templates.

A coach saves one of their plans as a template and later stamps it onto
any of their athletes from a chosen start date. Templates are private
to the coach that owns them.
"""

import logging
from datetime import timedelta
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.dates import days_between
from app.shared.errors import NotFound
from app.features.users.models import User
from .models import PlanSession, PlanTemplate, TemplateSession, TrainingPlan
from .repository import PlanRepository, TemplateRepository
from .schemas import PlanFromTemplate, TemplateCreate, TemplateResponse, TemplateUpdate
from .service import PLAN_NOT_FOUND, PlanService, planned_fields

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)

TEMPLATE_NOT_FOUND = "Template not found"


class TemplateService:
    """Template CRUD and plan creation from a template."""

    def __init__(self, db: AsyncSession, hub: Optional["ConnectionHub"] = None):
        self.db = db
        self.hub = hub
        self.templates = TemplateRepository(db)
        self.plans = PlanRepository(db)

    @staticmethod
    def to_response(template: PlanTemplate) -> TemplateResponse:
        response = TemplateResponse.model_validate(template)
        response.session_count = len(template.sessions)
        return response

    async def _get_owned(self, coach: User, template_id: str) -> PlanTemplate:
        template = await self.templates.get_with_sessions(template_id)
        if template is None or template.coach_id != coach.id:
            raise NotFound(TEMPLATE_NOT_FOUND)
        return template

    async def list_templates(self, coach: User) -> list[TemplateResponse]:
        return [self.to_response(t) for t in await self.templates.for_coach(coach.id)]

    async def create_from_plan(self, coach: User, plan_id: str, data: TemplateCreate) -> PlanTemplate:
        """
        Snapshot one of the coach's plans as a template.

        Raises:
            NotFound: Plan unknown or not the caller's
        """
        plan: Optional[TrainingPlan] = await self.plans.get_with_sessions(plan_id)
        if plan is None or plan.coach_id != coach.id:
            raise NotFound(PLAN_NOT_FOUND)

        template = await self.templates.create(
            coach_id=coach.id,
            name=data.name or plan.name,
            description=data.description if data.description is not None else plan.description,
            duration_days=days_between(plan.start_date, plan.end_date),
            sessions=[
                TemplateSession(day_offset=days_between(plan.start_date, s.date), **planned_fields(s))
                for s in plan.sessions
            ],
        )
        await self.db.commit()
        logger.info(f"Coach {coach.id} saved plan {plan.id} as template {template.id}")
        return await self.templates.get_with_sessions(template.id)

    async def update_template(self, coach: User, template_id: str, data: TemplateUpdate) -> PlanTemplate:
        template = await self._get_owned(coach, template_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items()
                   if v is not None or k == "description"}
        await self.templates.update(template, **changes)
        await self.db.commit()
        return template

    async def delete_template(self, coach: User, template_id: str) -> None:
        template = await self._get_owned(coach, template_id)
        await self.templates.delete(template)
        await self.db.commit()
        logger.info(f"Coach {coach.id} deleted template {template_id}")

    async def create_plan(self, coach: User, template_id: str, data: PlanFromTemplate) -> TrainingPlan:
        """
        Assign a plan built from a template.

        Raises:
            NotFound: Template unknown or not the caller's
            Forbidden: The athlete is not coached by the caller
        """
        template = await self._get_owned(coach, template_id)
        start = data.start_date
        return await PlanService(self.db, self.hub).assign_plan(
            coach,
            data.athlete_id,
            data.plan_name or template.name,
            start,
            start + timedelta(days=template.duration_days),
            [
                PlanSession(date=start + timedelta(days=s.day_offset), **planned_fields(s))
                for s in template.sessions
            ],
            description=template.description,
        )
