"""
Database Session Management

Provides the async database engine and session factory.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async version."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver otherwise manages transactions on its own and
    SAVEPOINT (used for per-record sync containment) does not work.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine for the given (sync-style) database URL."""
    async_url = _get_async_url(url)

    if async_url.startswith("sqlite"):
        engine = create_async_engine(
            async_url,
            connect_args={"check_same_thread": False}
        )
        enable_sqlite_savepoints(engine)
    elif async_url.startswith("postgresql"):
        # PostgreSQL with connection pool settings
        engine = create_async_engine(
            async_url,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,  # 30 minutes
        )
    else:
        engine = create_async_engine(async_url)
    return engine


async_engine = build_engine(settings.database_url)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create tables that do not exist yet (development convenience)."""
    from app.models import Base, import_all_models

    import_all_models()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
