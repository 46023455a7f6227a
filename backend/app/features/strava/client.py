"""
Strava API client.

Thin async wrapper over the REST API. Tokens are supplied by the
caller (see vault.TokenVault); this module never touches the database.

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from app.config import settings
from .errors import StravaAPIError, StravaAuthError

logger = logging.getLogger(__name__)


class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        activities = await client.get_activities(access_token, per_page=30)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or settings.strava_http_timeout_seconds

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ):
        """
        Make an authenticated API request.

        Raises:
            StravaAuthError: If authentication fails
            StravaAPIError: If API returns error or the request fails
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=f"{self.API_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            raise StravaAPIError(f"Request to {endpoint} failed: {e.__class__.__name__}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code == 401:
            raise StravaAuthError("Invalid or expired token")
        elif response.status_code != 200:
            raise StravaAPIError(f"API error: {response.status_code}")

        return response.json()

    async def get_activities(
        self,
        access_token: str,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        page: int = 1,
        per_page: int = 30
    ) -> list[dict]:
        """
        Get athlete activities (summary representation).

        Args:
            access_token: Valid access token
            after: Only activities after this time
            before: Only activities before this time
            page: Page number (default 1)
            per_page: Results per page (max 200)
        """
        params = {"page": page, "per_page": min(per_page, 200)}

        if after:
            params["after"] = int(after.timestamp())
        if before:
            params["before"] = int(before.timestamp())

        activities = await self._api_request(
            "GET",
            "/athlete/activities",
            access_token,
            params
        )
        if not isinstance(activities, list):
            raise StravaAPIError("Unexpected activities payload")
        return activities
