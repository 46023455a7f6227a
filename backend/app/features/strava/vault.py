"""
External token vault for Strava.

get_valid_access_token() hands out a usable access token:

- no stored pair          -> None
- expires_at in future    -> stored access token, no provider call
- expires_at in past      -> one refresh call; the full new pair is
                             written with a conditional UPDATE keyed on
                             the pair we read. If another writer got
                             there first, its (newer) token is returned.
- refresh failure         -> None, stale pair left untouched; callers
                             treat None as "re-authorization required".
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.dates import utcnow
from app.shared.errors import Conflict
from .errors import StravaError
from .models import StravaToken
from .oauth import StravaOAuth, TokenPair, parse_token_response
from .repository import StravaTokenRepository

logger = logging.getLogger(__name__)


class TokenVault:
    """
    Per-user Strava token storage with transparent refresh.

    Usage:
        vault = TokenVault(db)
        token = await vault.get_valid_access_token(user_id)
        if token is None:
            ...  # ask the user to reconnect
    """

    def __init__(self, db: AsyncSession, oauth: Optional[StravaOAuth] = None):
        self.db = db
        self.oauth = oauth or StravaOAuth()
        self.tokens = StravaTokenRepository(db)

    async def get(self, user_id: str) -> StravaToken | None:
        return await self.tokens.get_by_user_id(user_id)

    async def get_valid_access_token(self, user_id: str) -> Optional[str]:
        token = await self.tokens.get_by_user_id(user_id)
        if token is None:
            return None

        if not token.is_expired():
            return token.access_token

        observed_expiry = token.expires_at
        observed_refresh = token.refresh_token

        logger.info(f"Refreshing Strava token for user {user_id}")
        try:
            pair = parse_token_response(await self.oauth.refresh_token(observed_refresh))
        except StravaError as e:
            logger.warning(f"Strava token refresh failed for user {user_id}: {e}")
            return None

        replaced = await self.tokens.replace_if_unchanged(
            user_id,
            observed_expiry,
            observed_refresh,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_at=pair.expires_at,
            updated_at=utcnow(),
        )
        await self.db.commit()

        if replaced:
            return pair.access_token

        # Lost the race: someone else stored a pair after our read
        logger.info(f"Concurrent Strava refresh for user {user_id}; using stored token")
        current = await self.tokens.get_by_user_id(user_id, fresh=True)
        if current is None or current.is_expired():
            return None
        return current.access_token

    async def link(self, user_id: str, token_data: dict, scope: Optional[str] = None) -> StravaToken:
        """
        Store (or fully replace) a user's token pair after OAuth.

        Raises:
            Conflict: The Strava athlete is already linked to another user
        """
        pair: TokenPair = parse_token_response(token_data)
        if pair.athlete_id is None:
            raise Conflict("Strava did not return an athlete id")

        owner = await self.tokens.get_by_athlete_id(pair.athlete_id)
        if owner is not None and owner.user_id != user_id:
            raise Conflict("This Strava account is linked to another user")

        values = dict(
            strava_athlete_id=pair.athlete_id,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_at=pair.expires_at,
            scope=scope,
        )

        existing = await self.tokens.get_by_user_id(user_id)
        try:
            if existing is not None:
                token = await self.tokens.update(existing, updated_at=utcnow(), **values)
            else:
                token = await self.tokens.create(user_id=user_id, **values)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Strava account is already linked")

        logger.info(f"Linked Strava athlete {pair.athlete_id} to user {user_id}")
        return token

    async def unlink(self, user_id: str) -> bool:
        """
        Disconnect: best-effort revoke at Strava, then delete the pair.

        Returns:
            True if a pair was deleted
        """
        token = await self.tokens.get_by_user_id(user_id)
        if token is None:
            return False

        if not await self.oauth.deauthorize(token.access_token):
            logger.warning(f"Strava deauthorize did not succeed for user {user_id}")

        await self.tokens.delete(token)
        await self.db.commit()
        logger.info(f"Unlinked Strava for user {user_id}")
        return True
