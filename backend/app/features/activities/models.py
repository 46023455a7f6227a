"""
Activity model.

Activities are logged manually or imported from Strava. Imported rows
carry strava_id; (user_id, strava_id) is unique so a remote activity is
imported at most once per user no matter how syncs interleave.
"""

import uuid

from sqlalchemy import (
    BigInteger, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint,
)

from app.models.base import Base
from app.shared.constants import ActivityType
from app.shared.dates import utcnow


class Activity(Base):
    """A completed run."""

    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("user_id", "strava_id", name="uq_activities_user_strava"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # External origin (NULL for manual activities)
    strava_id = Column(BigInteger, nullable=True, index=True)

    name = Column(String(255), nullable=False)
    activity_type = Column(String(20), nullable=False, default=ActivityType.RUNNING.value)
    date = Column(DateTime, nullable=False, index=True)

    # Core metrics
    distance = Column(Float, nullable=False, default=0.0)  # km
    duration = Column(Integer, nullable=False, default=0)  # seconds (moving time)
    elevation_gain = Column(Integer, nullable=False, default=0)  # meters
    avg_pace = Column(Float, nullable=True)  # seconds per km

    # Heart rate / energy
    avg_heart_rate = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=True)
    calories = Column(Integer, nullable=True)

    # Route
    start_lat = Column(Float, nullable=True)
    start_lng = Column(Float, nullable=True)
    map_polyline = Column(Text, nullable=True)
    splits = Column(JSON, nullable=True)

    # Athlete / coach input
    notes = Column(Text, nullable=True)
    perceived_effort = Column(Integer, nullable=True)  # 1..10
    coach_feedback = Column(Text, nullable=True)

    plan_session_id = Column(
        String(36),
        ForeignKey("plan_sessions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Activity {self.id} {self.activity_type} {self.distance}km>"
