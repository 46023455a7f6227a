"""
Training plan endpoints.

Endpoints:
- GET    /plans                              - Coach's or athlete's plans
- GET    /plans/calendar                     - Sessions in a date range
- GET    /plans/{plan_id}                    - Plan with sessions and stats
- POST   /plans                              - Create plan (coach)
- PUT    /plans/{plan_id}                    - Update plan (owning coach)
- DELETE /plans/{plan_id}                    - Delete plan (owning coach)
- POST   /plans/{plan_id}/sessions           - Add session (owning coach)
- PATCH  /plans/sessions/{session_id}        - Complete / skip / notes
- PATCH  /plans/sessions/{session_id}/feedback - Coach feedback
- GET    /plans/templates                    - Coach's templates
- PUT    /plans/templates/{template_id}      - Rename / describe template
- DELETE /plans/templates/{template_id}      - Delete template
- POST   /plans/templates/{template_id}/create-plan - Assign a plan from a template
- POST   /plans/{plan_id}/duplicate          - Copy a plan onto an athlete
- POST   /plans/{plan_id}/create-template    - Save a plan as a template
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.shared.dates import to_naive_utc
from app.shared.schemas import FeedbackRequest, MessageResponse
from app.features.auth import get_current_user, require_coach
from app.features.plans import PlanService, TemplateService
from app.features.plans.schemas import (
    CalendarResponse,
    PlanCreate,
    PlanDetail,
    PlanDuplicate,
    PlanFromTemplate,
    PlanList,
    PlanResponse,
    PlanUpdate,
    SessionCreate,
    SessionResponse,
    SessionStatusUpdate,
    TemplateCreate,
    TemplateList,
    TemplateResponse,
    TemplateUpdate,
)
from app.features.realtime import ConnectionHub, get_hub
from app.features.users import User

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=PlanList)
async def list_plans(
    athlete_id: Optional[str] = Query(None, alias="athleteId"),
    status: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    plans = await PlanService(db).list_plans(user, athlete_id=athlete_id, status=status)
    return PlanList(plans=plans)


# Declared before /{plan_id} so "calendar" and "templates" are not taken for an ID
@router.get("/calendar", response_model=CalendarResponse)
async def calendar(
    date_from: datetime = Query(..., alias="from"),
    date_to: datetime = Query(..., alias="to"),
    athlete_id: Optional[str] = Query(None, alias="athleteId"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    sessions = await PlanService(db).calendar(
        user,
        to_naive_utc(date_from),
        to_naive_utc(date_to),
        athlete_id=athlete_id,
    )
    return CalendarResponse(sessions=sessions)


@router.get("/templates", response_model=TemplateList)
async def list_templates(
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    templates = await TemplateService(db).list_templates(coach)
    return TemplateList(templates=templates)


@router.put("/templates/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    data: TemplateUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    template = await TemplateService(db).update_template(coach, template_id, data)
    return TemplateService.to_response(template)


@router.delete("/templates/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: str,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    await TemplateService(db).delete_template(coach, template_id)
    return MessageResponse(message="Template deleted")


@router.post("/templates/{template_id}/create-plan", response_model=PlanResponse, status_code=201)
async def create_plan_from_template(
    template_id: str,
    data: PlanFromTemplate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Assign a plan built from one of the coach's templates."""
    plan = await TemplateService(db, hub).create_plan(coach, template_id, data)
    return await PlanService(db).to_response(plan)


@router.get("/{plan_id}", response_model=PlanDetail)
async def get_plan(
    plan_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return await PlanService(db).get_plan(user, plan_id)


@router.post("", response_model=PlanResponse, status_code=201)
async def create_plan(
    data: PlanCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Assign a plan (with optional sessions) to one of the coach's athletes."""
    service = PlanService(db, hub)
    plan = await service.create_plan(coach, data)
    return await service.to_response(plan)


@router.put("/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: str,
    data: PlanUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    service = PlanService(db)
    plan = await service.update_plan(coach, plan_id, data)
    return await service.to_response(plan)


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_plan(
    plan_id: str,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    await PlanService(db).delete_plan(coach, plan_id)
    return MessageResponse(message="Plan deleted")


@router.post("/{plan_id}/sessions", response_model=SessionResponse, status_code=201)
async def add_session(
    plan_id: str,
    data: SessionCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    session = await PlanService(db).add_session(coach, plan_id, data)
    return SessionResponse.model_validate(session)


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    data: SessionStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Mark a session completed or skipped, or add athlete notes."""
    session = await PlanService(db, hub).update_session(user, session_id, data)
    return SessionResponse.model_validate(session)


@router.patch("/sessions/{session_id}/feedback", response_model=SessionResponse)
async def session_feedback(
    session_id: str,
    data: FeedbackRequest,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    session = await PlanService(db, hub).session_feedback(coach, session_id, data.feedback)
    return SessionResponse.model_validate(session)


@router.post("/{plan_id}/duplicate", response_model=PlanResponse, status_code=201)
async def duplicate_plan(
    plan_id: str,
    data: PlanDuplicate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Copy a plan onto one of the coach's athletes from a new start date."""
    service = PlanService(db, hub)
    plan = await service.duplicate_plan(coach, plan_id, data)
    return await service.to_response(plan)


@router.post("/{plan_id}/create-template", response_model=TemplateResponse, status_code=201)
async def create_template(
    plan_id: str,
    data: TemplateCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db)
):
    template = await TemplateService(db).create_from_plan(coach, plan_id, data)
    return TemplateService.to_response(template)
