"""
Gear tracking module.

Usage:
    from app.features.gear import GearService
"""

from .models import Gear, ActivityGear
from .repository import GearRepository, GearUsage
from .service import GearService

__all__ = [
    "Gear",
    "ActivityGear",
    "GearRepository",
    "GearUsage",
    "GearService",
]
