"""
Strava token repository.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import StravaToken


class StravaTokenRepository(BaseRepository[StravaToken]):
    """Repository for Strava OAuth tokens."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, StravaToken)

    async def get_by_user_id(self, user_id: str, fresh: bool = False) -> StravaToken | None:
        """
        Get token for user.

        Args:
            user_id: User's ID
            fresh: Overwrite any copy already loaded in this session

        Returns:
            StravaToken if found, None otherwise
        """
        query = select(StravaToken).where(StravaToken.user_id == user_id)
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_athlete_id(self, athlete_id: str) -> StravaToken | None:
        """Get token by Strava athlete ID."""
        return await self.get_by(strava_athlete_id=athlete_id)

    async def replace_if_unchanged(
        self,
        user_id: str,
        observed_expires_at: datetime,
        observed_refresh_token: str,
        **values,
    ) -> bool:
        """
        Replace the token pair only if nobody replaced it since we read it.

        Returns:
            True if this call wrote the new pair
        """
        rows = await self.update_where(
            StravaToken.user_id == user_id,
            StravaToken.expires_at == observed_expires_at,
            StravaToken.refresh_token == observed_refresh_token,
            **values,
        )
        return rows == 1

    async def connected_user_ids(self, user_ids: list[str]) -> set[str]:
        """Subset of user_ids that have a vault entry."""
        if not user_ids:
            return set()
        result = await self.db.execute(
            select(StravaToken.user_id).where(StravaToken.user_id.in_(user_ids))
        )
        return set(result.scalars().all())
