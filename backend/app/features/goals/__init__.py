"""
Personal goals module.

Usage:
    from app.features.goals import GoalService
"""

from .models import Goal
from .repository import GoalRepository
from .service import GoalService, goal_window

__all__ = [
    "Goal",
    "GoalRepository",
    "GoalService",
    "goal_window",
]
