"""
Strava sync services.

Provides:
- StravaSyncService: Sync orchestrator (one user, or all athletes of a coach)
- map_strava_activity: Strava payload -> Activity columns
"""

from .service import StravaSyncService, SyncResult, AthleteSyncReport, NOT_CONNECTED
from .activities import map_strava_activity, is_synced_type
from .config import SyncConfig, SYNCED_ACTIVITY_TYPES

__all__ = [
    # Services
    "StravaSyncService",
    "SyncResult",
    "AthleteSyncReport",
    "NOT_CONNECTED",
    # Mapping
    "map_strava_activity",
    "is_synced_type",
    # Config
    "SyncConfig",
    "SYNCED_ACTIVITY_TYPES",
]
