"""
Access policy for the coach/athlete relationship.

This is the only place that decides who may act on whose data. The
relationship itself is the athlete's users.coach_id column:

- a user always may act on their own resources;
- a coach may act on a resource owned by X only if coach_of(X) is that coach;
- athletes never act on each other's resources;
- two users may message each other only if one coaches the other.

Predicates return bools; ensure_* variants raise Forbidden (or NotFound
where existence must not leak).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import Forbidden, NotFound
from app.features.users.models import User
from app.features.users.repository import UserRepository

logger = logging.getLogger(__name__)


def owns_resource(user_id: str, owner_id: str) -> bool:
    return user_id == owner_id


class AccessPolicy:
    """Relationship checks backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.users = UserRepository(db)

    async def coach_of(self, athlete_id: str) -> str | None:
        """Current coach of a user, or None."""
        return await self.users.get_coach_id(athlete_id)

    async def is_coach_of(self, coach_id: str, athlete_id: str) -> bool:
        if coach_id == athlete_id:
            return False
        return await self.coach_of(athlete_id) == coach_id

    async def can_act_on(self, actor: User, owner_id: str) -> bool:
        """Owner always; otherwise only the owner's current coach."""
        if owns_resource(actor.id, owner_id):
            return True
        if not actor.is_coach:
            return False
        return await self.is_coach_of(actor.id, owner_id)

    async def can_message(self, user_a: str, user_b: str) -> bool:
        """True iff one of the two users coaches the other."""
        if user_a == user_b:
            return False
        return (
            await self.is_coach_of(user_a, user_b)
            or await self.is_coach_of(user_b, user_a)
        )

    async def ensure_can_act_on(
        self,
        actor: User,
        owner_id: str,
        reason: str = "You do not have access to this resource",
    ) -> None:
        if not await self.can_act_on(actor, owner_id):
            raise Forbidden(reason)

    async def ensure_visible(
        self,
        actor: User,
        owner_id: str,
        message: str = "Not found",
    ) -> None:
        """Like ensure_can_act_on, but a denied caller sees NotFound."""
        if not await self.can_act_on(actor, owner_id):
            raise NotFound(message)

    async def ensure_coach_of(
        self,
        coach: User,
        athlete_id: str,
        reason: str = "You are not this athlete's coach",
    ) -> None:
        if not coach.is_coach or not await self.is_coach_of(coach.id, athlete_id):
            raise Forbidden(reason)

    async def ensure_can_message(self, sender_id: str, receiver_id: str) -> None:
        if not await self.can_message(sender_id, receiver_id):
            raise Forbidden("You cannot message this user")

    async def remove_athlete(self, coach_id: str, athlete_id: str) -> None:
        """
        Unlink an athlete from their coach.

        Single mutation (coach_id = NULL). Activities, messages and plans
        stay attached to the athlete. Does not commit.

        Raises:
            NotFound: If the athlete is not this coach's
        """
        if await self.users.clear_coach(athlete_id, coach_id) != 1:
            raise NotFound("Athlete not found")
        logger.info(f"Coach {coach_id} removed athlete {athlete_id}")
