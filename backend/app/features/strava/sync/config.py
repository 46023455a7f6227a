"""
Strava sync configuration constants.
"""

from app.config import settings
from app.shared.constants import SYNCED_STRAVA_TYPES

# Only running kinds are imported; rides, swims, walks... are skipped
SYNCED_ACTIVITY_TYPES = SYNCED_STRAVA_TYPES


class SyncConfig:
    """Configuration for sync behavior."""

    # How many activities to fetch per sync call (one page)
    ACTIVITIES_PER_PAGE = settings.strava_sync_page_size

    # Webhook aspect types
    WEBHOOK_CREATE = "create"
    WEBHOOK_UPDATE = "update"
    WEBHOOK_DELETE = "delete"
    WEBHOOK_ACTIVITY_OBJECT = "activity"
