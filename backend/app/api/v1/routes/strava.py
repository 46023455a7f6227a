"""
Strava Routes

Endpoints for Strava integration:
- /strava/auth       - Authorization URL for the current user
- /strava/callback   - OAuth callback (redirects back to the web client)
- /strava/sync       - Import recent activities of the current user
- /strava/sync-all   - Coach: import for every connected athlete
- /strava/disconnect - Revoke and delete stored tokens
- /strava/status     - Connection status
- /strava/webhook    - Push subscription (verification + events)
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as SchemaError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.shared.errors import AppError, ValidationError
from app.shared.schemas import MessageResponse
from app.features.activities import ActivityRepository
from app.features.auth import get_current_user, issue_state_token, require_coach, verify_state_token
from app.features.realtime import ConnectionHub, get_hub
from app.features.strava import StravaError, StravaOAuth, TokenVault, handle_webhook_event
from app.features.strava.schemas import (
    AthleteSyncResult,
    StravaAuthUrl,
    StravaStatus,
    SyncAllResponse,
    SyncResponse,
    WebhookEvent,
)
from app.features.strava.sync import StravaSyncService
from app.features.users import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava", tags=["Strava"])


def _settings_redirect(status: str, message: Optional[str] = None) -> RedirectResponse:
    params = {"strava": status}
    if message:
        params["message"] = message
    return RedirectResponse(url=f"{settings.frontend_url.rstrip('/')}/settings?{urlencode(params)}")


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/auth", response_model=StravaAuthUrl)
async def strava_auth(user: User = Depends(get_current_user)):
    """
    Initiate Strava OAuth flow.

    The state parameter is a short-lived signed token carrying the user ID,
    so the callback needs no server-side state.
    """
    if not settings.strava_configured:
        raise HTTPException(status_code=503, detail="Strava integration not configured")

    auth_url = StravaOAuth().get_authorization_url(state=issue_state_token(user.id))
    logger.info(f"Strava OAuth initiated for user {user.id}")
    return StravaAuthUrl(auth_url=auth_url)


@router.get("/callback")
async def strava_callback(
    code: Optional[str] = Query(None),
    scope: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """
    Handle Strava OAuth callback.

    Exchanges the code, stores the token pair and runs a first sync.
    Always redirects to the web client's settings page.
    """
    if error:
        logger.warning(f"Strava OAuth error: {error}")
        return _settings_redirect("error", error)

    user_id = verify_state_token(state)
    if not user_id or not code:
        logger.warning("Invalid OAuth state")
        return _settings_redirect("error", "Invalid or expired session")

    vault = TokenVault(db)
    try:
        token_data = await vault.oauth.exchange_code(code)
        await vault.link(user_id, token_data, scope=scope)
    except StravaError as e:
        logger.error(f"Token exchange failed for user {user_id}: {e}")
        return _settings_redirect("error", "Token exchange failed")
    except AppError as e:
        return _settings_redirect("error", e.message)

    try:
        await StravaSyncService(db, hub, vault=vault).sync_activities(user_id)
    except Exception as e:
        await db.rollback()
        logger.error(f"Initial Strava sync failed for user {user_id}: {e}")

    return _settings_redirect("success")


# =============================================================================
# Sync
# =============================================================================

@router.post("/sync", response_model=SyncResponse)
async def sync(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    vault = TokenVault(db)
    if await vault.get(user.id) is None:
        raise ValidationError("Strava is not connected")

    result = await StravaSyncService(db, hub, vault=vault).sync_activities(user.id)
    return SyncResponse(
        message=f"Synced {result.synced} activities",
        synced_activities=result.synced,
        linked_to_plans=result.linked,
    )


@router.post("/sync-all", response_model=SyncAllResponse)
async def sync_all(
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """Sync every athlete of the coach that has Strava connected."""
    reports = await StravaSyncService(db, hub).sync_all_athletes(coach.id)
    return SyncAllResponse(results=[
        AthleteSyncResult(
            athlete_id=r.athlete_id,
            name=r.name,
            synced=r.synced,
            linked=r.linked,
            error=r.error,
        )
        for r in reports
    ])


# =============================================================================
# Status & Disconnect
# =============================================================================

@router.delete("/disconnect", response_model=MessageResponse)
async def disconnect_strava(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Disconnect Strava account.

    - Revokes access at Strava (best effort)
    - Deletes stored tokens

    Imported activities are kept.
    """
    await TokenVault(db).unlink(user.id)
    return MessageResponse(message="Strava disconnected")


@router.get("/status", response_model=StravaStatus)
async def get_strava_status(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    token = await TokenVault(db).get(user.id)
    if token is None:
        return StravaStatus(connected=False)

    return StravaStatus(
        connected=True,
        strava_athlete_id=token.strava_athlete_id,
        last_sync=await ActivityRepository(db).last_synced_at(user.id),
    )


# =============================================================================
# Webhook
# =============================================================================

@router.get("/webhook")
async def verify_webhook(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
):
    """
    Verify webhook subscription with Strava.

    Strava calls this endpoint during subscription to verify ownership.
    """
    expected = settings.strava_webhook_verify_token
    if hub_mode == "subscribe" and expected and hub_verify_token == expected:
        logger.info("Strava webhook verification successful")
        return {"hub.challenge": hub_challenge}

    logger.warning(f"Strava webhook verification failed: mode={hub_mode}")
    raise HTTPException(status_code=403, detail="Verification failed")


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    db: AsyncSession = Depends(get_async_db),
    hub: ConnectionHub = Depends(get_hub)
):
    """
    Process a Strava push event.

    Always acknowledged with 200, otherwise Strava keeps retrying.
    """
    try:
        event = WebhookEvent.model_validate(await request.json())
    except (SchemaError, ValueError) as e:
        logger.warning(f"Malformed Strava webhook payload: {e}")
        return {"received": True}

    logger.info(
        f"Strava webhook: {event.object_type}.{event.aspect_type} "
        f"object={event.object_id} owner={event.owner_id}"
    )
    try:
        outcome = await handle_webhook_event(db, event, hub)
        logger.info(f"Strava webhook handled: {outcome}")
    except Exception as e:
        await db.rollback()
        logger.error(f"Error processing Strava webhook: {e}")

    return {"received": True}
