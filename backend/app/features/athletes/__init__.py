"""
Coach roster.

Usage:
    from app.features.athletes import AthleteService

    entries = await AthleteService(db).roster(coach)
"""

from .schemas import (
    PeriodTotals,
    RosterEntry,
    RosterResponse,
    AthleteStats,
    AthleteDetail,
    AthleteDetailEnvelope,
)
from .service import AthleteService

__all__ = [
    "PeriodTotals",
    "RosterEntry",
    "RosterResponse",
    "AthleteStats",
    "AthleteDetail",
    "AthleteDetailEnvelope",
    "AthleteService",
]
