"""
Home screen dashboard.

Usage:
    from app.features.dashboard import DashboardService
"""

from .schemas import Dashboard
from .service import DashboardService

__all__ = [
    "Dashboard",
    "DashboardService",
]
