"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh
- Token revocation (deauthorization)
"""

import logging
from datetime import datetime, timezone
from typing import NamedTuple, Optional
from urllib.parse import urlencode

import httpx

from app.config import settings
from .errors import StravaOAuthError

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "read,activity:read_all"


class TokenPair(NamedTuple):
    """Parsed token endpoint response."""

    access_token: str
    refresh_token: str
    expires_at: datetime  # naive UTC
    athlete_id: Optional[str] = None


def parse_token_response(data: dict) -> TokenPair:
    """
    Parse a token endpoint response.

    Strava returns expires_at as a unix timestamp; expires_in is used
    when it is missing.

    Raises:
        StravaOAuthError: If required fields are missing
    """
    try:
        if data.get("expires_at") is not None:
            expires_ts = int(data["expires_at"])
        else:
            expires_ts = int(datetime.now(timezone.utc).timestamp()) + int(data["expires_in"])
        athlete = data.get("athlete") or {}
        return TokenPair(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=datetime.fromtimestamp(expires_ts, tz=timezone.utc).replace(tzinfo=None),
            athlete_id=str(athlete["id"]) if athlete.get("id") is not None else None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StravaOAuthError(f"Malformed token response: missing {e}") from e


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(state=state_token)
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"
    DEAUTHORIZE_URL = "https://www.strava.com/oauth/deauthorize"

    def __init__(self):
        self.client_id = settings.strava_client_id
        self.client_secret = settings.strava_client_secret
        self.timeout = settings.strava_http_timeout_seconds

    def get_authorization_url(
        self,
        state: str,
        redirect_uri: Optional[str] = None,
        scope: str = DEFAULT_SCOPE,
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            state: Signed state token binding the round trip to a user
            redirect_uri: Callback URL (defaults to STRAVA_REDIRECT_URI)
            scope: OAuth scope

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri or settings.strava_redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "auto",
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def _token_request(self, payload: dict, action: str) -> dict:
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **payload,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            raise StravaOAuthError(f"Token {action} failed: {e.__class__.__name__}") from e

        if response.status_code != 200:
            # Response body may echo request details; status only
            logger.error(f"Strava token {action} failed: HTTP {response.status_code}")
            raise StravaOAuthError(f"Token {action} failed: {response.status_code}")

        return response.json()

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890,
                "athlete": {"id": 123, "firstname": "...", ...}
            }

        Raises:
            StravaOAuthError: If token exchange fails
        """
        return await self._token_request(
            {"code": code, "grant_type": "authorization_code"}, "exchange"
        )

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Refresh an expired access token.

        Raises:
            StravaOAuthError: If token refresh fails
        """
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"}, "refresh"
        )

    async def deauthorize(self, access_token: str) -> bool:
        """
        Revoke Strava access (user disconnect).

        Returns:
            True if deauthorization was successful
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.DEAUTHORIZE_URL,
                    data={"access_token": access_token},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Strava deauthorize failed: {e.__class__.__name__}")
            return False
        return response.status_code == 200
