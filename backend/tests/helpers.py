"""
Test helpers shared by fixtures and test modules.
"""

from app.features.auth.security import hash_password, issue_session
from app.features.users.models import User

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


class RecordingHub:
    """Stands in for ConnectionHub; remembers every emitted event."""

    def __init__(self):
        self.events = []

    async def emit_to_user(self, user_id, event, data):
        self.events.append((user_id, event, data))
        return 1

    def sent_to(self, user_id, event=None):
        return [
            data for uid, name, data in self.events
            if uid == user_id and (event is None or name == event)
        ]


def auth_headers(user) -> dict:
    token = issue_session(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


async def load_user(db, user_id: str) -> User:
    """Attach a seeded user to the session under test."""
    return await db.get(User, user_id)
