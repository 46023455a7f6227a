"""
Strava token vault model.
"""

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text

from app.models.base import Base
from app.shared.dates import utcnow


class StravaToken(Base):
    """
    Strava OAuth token storage.

    One row per user. The whole pair (access, refresh, expiry) is
    replaced on link and on every refresh, and the row is deleted on
    disconnect. This is the only place refresh tokens are persisted.
    """

    __tablename__ = "strava_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Strava athlete info
    strava_athlete_id = Column(String(20), unique=True, nullable=False, index=True)

    # OAuth tokens
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    expires_at = Column(DateTime, nullable=False)  # naive UTC

    # Token scope
    scope = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def is_expired(self, now=None) -> bool:
        """Expired once expires_at is not in the future."""
        return self.expires_at <= (now or utcnow())

    def __repr__(self):
        return f"<StravaToken user_id={self.user_id} athlete_id={self.strava_athlete_id}>"
