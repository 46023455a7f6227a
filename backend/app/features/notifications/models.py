"""
Notification model.

Types (see NotificationType):
- PLAN_ASSIGNED: coach assigned a plan to the athlete
- SESSION_COMPLETED / SESSION_SKIPPED: athlete updated a planned session
- COACH_FEEDBACK: coach commented on an activity or session
- ACTIVITY_SYNCED: a new activity of the athlete arrived from Strava
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.models.base import Base
from app.shared.dates import utcnow


class Notification(Base):
    """User notification."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(30), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)

    # Optional references
    from_user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    plan_id = Column(String(36), ForeignKey("training_plans.id", ondelete="SET NULL"), nullable=True)
    session_id = Column(String(36), ForeignKey("plan_sessions.id", ondelete="SET NULL"), nullable=True)
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="SET NULL"), nullable=True)

    # Status
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<Notification {self.id} type={self.type} read={self.read}>"
