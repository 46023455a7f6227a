"""
User profile service.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import NotFound
from .models import User
from .repository import UserRepository
from .schemas import ProfileUpdate, PublicProfile

logger = logging.getLogger(__name__)


class UserService:
    """Profile reads and updates."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        if changes:
            await self.users.update(user, **changes)
            await self.db.commit()
            logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
        return user

    async def get_public_profile(self, user_id: str) -> PublicProfile:
        from app.features.activities.repository import ActivityRepository

        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")

        activity_count = await ActivityRepository(self.db).count_for_user(user.id)
        athlete_count = await self.users.count_athletes(user.id)

        return PublicProfile(
            id=user.id,
            name=user.name,
            role=user.role,
            avatar=user.avatar,
            created_at=user.created_at,
            activity_count=activity_count,
            athlete_count=athlete_count,
        )
