"""
Shared test fixtures.

Every test gets its own SQLite file. Tables are created and seed users
inserted through a plain sync engine; the code under test talks to the
same file through the async engine, exactly as in production.
"""

import os
import tempfile
from types import SimpleNamespace

# Settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-0123456789")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.gettempdir(), 'runnio-test-default.db')}",
)
os.environ.setdefault("STRAVA_CLIENT_ID", "12345")
os.environ.setdefault("STRAVA_CLIENT_SECRET", "strava-test-secret")
os.environ.setdefault("STRAVA_WEBHOOK_VERIFY_TOKEN", "verify-me")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.db.session import enable_sqlite_savepoints, get_async_db
from app.models import Base, import_all_models
from app.shared.constants import UserRole
from app.features.users.models import User

from tests.helpers import PASSWORD_HASH, RecordingHub

import_all_models()


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def database_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def sync_engine(database_path):
    engine = create_engine(f"sqlite:///{database_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sync_engine, database_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{database_path}",
        poolclass=NullPool,
    )
    enable_sqlite_savepoints(engine)
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def hub():
    return RecordingHub()


# =============================================================================
# Seed data
# =============================================================================

def _make_user(session: Session, email: str, name: str, role: UserRole, coach_id=None) -> User:
    user = User(
        email=email,
        password_hash=PASSWORD_HASH,
        name=name,
        role=role.value,
        coach_id=coach_id,
    )
    session.add(user)
    session.flush()
    return user


@pytest.fixture
def users(sync_engine):
    """
    Two coaches, each with one athlete, plus an unattached athlete.

    Returned as detached snapshots (id, email, name, role, coach_id).
    """
    with Session(sync_engine, expire_on_commit=False) as session:
        coach = _make_user(session, "coach@example.com", "Coach Carter", UserRole.COACH)
        athlete = _make_user(session, "athlete@example.com", "Alice Runner", UserRole.ATHLETE, coach.id)
        other_coach = _make_user(session, "other.coach@example.com", "Other Coach", UserRole.COACH)
        other_athlete = _make_user(
            session, "other.athlete@example.com", "Bob Jogger", UserRole.ATHLETE, other_coach.id
        )
        free_athlete = _make_user(session, "free@example.com", "Free Athlete", UserRole.ATHLETE)
        session.commit()

        return SimpleNamespace(
            coach=coach,
            athlete=athlete,
            other_coach=other_coach,
            other_athlete=other_athlete,
            free_athlete=free_athlete,
        )


@pytest.fixture
def seed(sync_engine):
    """Insert arbitrary rows through the sync engine."""

    def _seed(*rows):
        with Session(sync_engine, expire_on_commit=False) as session:
            session.add_all(rows)
            session.commit()
        return rows[0] if len(rows) == 1 else rows

    return _seed



# =============================================================================
# API client
# =============================================================================

@pytest.fixture
def app(session_factory):
    from app.main import app as fastapi_app
    from app.features.realtime import ConnectionHub

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_async_db] = override_get_async_db
    fastapi_app.state.hub = ConnectionHub()
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
