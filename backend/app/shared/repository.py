"""
Base repository with common data access operations.

Feature repositories inherit from BaseRepository and add their own
queries. Nothing here commits: the owning service decides where the
transaction ends.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, User)

        async def get_by_email(self, email: str) -> User | None:
            return await self.get_by(email=email)
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import ColumnElement, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Generic async repository bound to one model class."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _filtered(self, query, criteria: dict[str, Any]):
        for key, value in criteria.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by_id(self, id: str) -> T | None:
        """Get entity by primary key."""
        return await self.db.get(self.model, id)

    async def get_by(self, **kwargs) -> T | None:
        """Get the first entity whose fields equal the given values."""
        query = self._filtered(select(self.model), kwargs).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, *conditions: ColumnElement[bool], **kwargs) -> bool:
        """Check for a matching row without loading it."""
        inner = self._filtered(select(self.model.id), kwargs).where(*conditions)
        result = await self.db.execute(select(exists(inner)))
        return bool(result.scalar())

    async def list(
        self,
        *conditions: ColumnElement[bool],
        order_by: Any = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        """
        List entities matching SQL conditions.

        Args:
            *conditions: SQLAlchemy boolean expressions, AND-ed together
            order_by: Column or expression to order by
            limit: Maximum rows to return (None for all)
            offset: Rows to skip

        Returns:
            Matching entities
        """
        query = select(self.model).where(*conditions)
        if order_by is not None:
            query = query.order_by(order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_where(self, *conditions: ColumnElement[bool]) -> int:
        """Count rows matching SQL conditions."""
        query = select(func.count()).select_from(self.model).where(*conditions)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def create(self, **kwargs) -> T:
        """Insert a new entity and flush to obtain generated values."""
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity: T, **kwargs) -> T:
        """Set fields on a loaded entity."""
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        return entity

    async def update_where(self, *conditions: ColumnElement[bool], **values) -> int:
        """
        Atomic conditional UPDATE.

        Returns the number of rows affected, so callers can tell whether
        they won a race ("update only if still PENDING", "only if the
        token is still the one we saw").
        """
        stmt = (
            update(self.model)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def delete(self, entity: T) -> None:
        """Delete entity."""
        await self.db.delete(entity)
        await self.db.flush()
