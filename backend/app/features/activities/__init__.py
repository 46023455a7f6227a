"""
Activities module.

Usage:
    from app.features.activities import ActivityService, ActivityRepository
"""

from .models import Activity
from .schemas import (
    ActivityCreate,
    ActivityUpdate,
    ActivityBrief,
    ActivityResponse,
    ActivityDetail,
    ActivityList,
)
from .repository import ActivityRepository, ActivityTotals
from .service import ActivityService, compute_pace

__all__ = [
    "Activity",
    "ActivityCreate",
    "ActivityUpdate",
    "ActivityBrief",
    "ActivityResponse",
    "ActivityDetail",
    "ActivityList",
    "ActivityRepository",
    "ActivityTotals",
    "ActivityService",
    "compute_pace",
]
