"""
Strava integration module.

Usage:
    from app.features.strava import TokenVault, StravaOAuth, StravaClient
    from app.features.strava.sync import StravaSyncService

Components:
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh, deauthorize)
- StravaClient: API client (activity list)
- TokenVault: Token storage with transparent refresh
- StravaSyncService: Activity import
- handle_webhook_event: Push subscription events

Models:
- StravaToken: OAuth tokens storage
"""

from .models import StravaToken
from .errors import StravaError, StravaAPIError, StravaAuthError, StravaOAuthError
from .oauth import StravaOAuth, TokenPair, parse_token_response
from .client import StravaClient
from .repository import StravaTokenRepository
from .vault import TokenVault
from .webhook import handle_webhook_event

__all__ = [
    # Models
    "StravaToken",
    # Errors
    "StravaError",
    "StravaAPIError",
    "StravaAuthError",
    "StravaOAuthError",
    # OAuth
    "StravaOAuth",
    "TokenPair",
    "parse_token_response",
    # Client
    "StravaClient",
    # Storage
    "StravaTokenRepository",
    "TokenVault",
    # Webhook
    "handle_webhook_event",
]
