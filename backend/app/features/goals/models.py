"""
Personal goal model.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text

from app.models.base import Base
from app.shared.constants import GoalStatus
from app.shared.dates import utcnow


class Goal(Base):
    """
    A target over a time window, e.g. 100 km this month.

    [start_date, end_date) is fixed at creation; end_date is the
    midnight after the last day. current_value is recomputed from the
    user's activities, never incremented.
    """

    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    goal_type = Column(String(20), nullable=False)
    period = Column(String(10), nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    target_value = Column(Float, nullable=False)
    current_value = Column(Float, nullable=False, default=0.0)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    status = Column(String(10), nullable=False, default=GoalStatus.ACTIVE.value, index=True)
    completed_at = Column(DateTime, nullable=True)

    # Milestone notifications; last_milestone is the highest percent already announced
    notify_at_50 = Column(Boolean, nullable=False, default=True)
    notify_at_75 = Column(Boolean, nullable=False, default=True)
    notify_at_100 = Column(Boolean, nullable=False, default=True)
    last_milestone = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Goal {self.id} {self.goal_type} {self.current_value}/{self.target_value}>"
