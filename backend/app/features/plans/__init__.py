"""
Training plans module.

Models:
- TrainingPlan: Coach-assigned plan for one athlete
- PlanSession: A planned workout on a given day
- PlanTemplate: Reusable plan shape owned by a coach

Usage:
    from app.features.plans import PlanService, TemplateService
"""

from .models import TrainingPlan, PlanSession, PlanTemplate, TemplateSession
from .repository import PlanRepository, TemplateRepository
from .service import PlanService, plan_stats
from .templates import TemplateService

__all__ = [
    "TrainingPlan",
    "PlanSession",
    "PlanTemplate",
    "TemplateSession",
    "PlanRepository",
    "TemplateRepository",
    "PlanService",
    "TemplateService",
    "plan_stats",
]
