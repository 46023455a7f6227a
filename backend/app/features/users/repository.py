"""
User repository.

Data access layer for the User model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import UserRole
from app.shared.repository import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email (case-insensitive).

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_coach_id(self, athlete_id: str) -> str | None:
        """Read only the coach_id column of a user."""
        result = await self.db.execute(
            select(User.coach_id).where(User.id == athlete_id)
        )
        return result.scalar_one_or_none()

    async def get_athletes(self, coach_id: str) -> list[User]:
        """All athletes currently coached by coach_id, ordered by name."""
        return await self.list(
            User.coach_id == coach_id,
            User.role == UserRole.ATHLETE.value,
            order_by=User.name,
        )

    async def get_athlete_ids(self, coach_id: str) -> list[str]:
        result = await self.db.execute(
            select(User.id).where(User.coach_id == coach_id)
        )
        return list(result.scalars().all())

    async def count_athletes(self, coach_id: str) -> int:
        return await self.count_where(User.coach_id == coach_id)

    async def clear_coach(self, athlete_id: str, coach_id: str) -> int:
        """
        Unlink an athlete from a coach.

        Only succeeds while the athlete still belongs to that coach.

        Returns:
            Number of rows updated (0 or 1)
        """
        return await self.update_where(
            User.id == athlete_id,
            User.coach_id == coach_id,
            coach_id=None,
        )
