"""
Strava webhook event handling.

Strava retries deliveries that are not acknowledged with 200, so the
route always acknowledges; this module reports what it did instead of
raising.
"""

import logging
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import AppError
from .repository import StravaTokenRepository
from .schemas import WebhookEvent
from .sync.config import SyncConfig
from .sync.service import StravaSyncService

if TYPE_CHECKING:
    from app.features.realtime.hub import ConnectionHub

logger = logging.getLogger(__name__)


async def handle_webhook_event(
    db: AsyncSession,
    event: WebhookEvent,
    hub: Optional["ConnectionHub"] = None,
) -> str:
    """
    Apply one webhook event.

    - non-activity objects (athlete deauth etc.) are ignored
    - unknown owners are ignored
    - create/update trigger a sync for the owner
    - delete removes the owner's activity with that strava_id

    Returns:
        Short outcome label (for logging and tests)
    """
    if event.object_type != SyncConfig.WEBHOOK_ACTIVITY_OBJECT:
        return "ignored"

    token = await StravaTokenRepository(db).get_by_athlete_id(str(event.owner_id))
    if token is None:
        logger.info(f"Webhook for unknown Strava athlete {event.owner_id}")
        return "unknown_owner"

    sync = StravaSyncService(db, hub)

    if event.aspect_type in (SyncConfig.WEBHOOK_CREATE, SyncConfig.WEBHOOK_UPDATE):
        try:
            result = await sync.sync_activities(token.user_id)
        except AppError as e:
            logger.warning(f"Webhook sync for user {token.user_id} failed: {e.message}")
            return "sync_failed"
        return f"synced:{result.synced}"

    if event.aspect_type == SyncConfig.WEBHOOK_DELETE:
        deleted = await sync.delete_remote_activity(token.user_id, event.object_id)
        return f"deleted:{deleted}"

    return "ignored"
