"""
Training plan models.

Models:
- TrainingPlan: A coach's plan for one athlete
- PlanSession: One planned workout on a given day
- PlanTemplate: A coach's reusable plan, sessions as day offsets
- TemplateSession: One session of a template
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.shared.constants import PlanStatus
from app.shared.dates import utcnow


class TrainingPlan(Base):
    """Training plan assigned by a coach to an athlete."""

    __tablename__ = "training_plans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=PlanStatus.ACTIVE.value, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    sessions = relationship(
        "PlanSession",
        back_populates="plan",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PlanSession.date",
    )

    def __repr__(self):
        return f"<TrainingPlan {self.id} {self.status}>"


class PlanSession(Base):
    """
    Planned session.

    completed/skipped are flipped by the athlete, the coach, a manual
    activity or Strava sync linking an activity to the session.
    """

    __tablename__ = "plan_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    plan_id = Column(String(36), ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(DateTime, nullable=False, index=True)
    session_type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Targets
    target_distance = Column(Float, nullable=True)  # km
    target_duration = Column(Integer, nullable=True)  # seconds
    target_pace = Column(Float, nullable=True)  # seconds per km

    # Status
    completed = Column(Boolean, nullable=False, default=False)
    skipped = Column(Boolean, nullable=False, default=False)

    athlete_notes = Column(Text, nullable=True)
    coach_feedback = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    plan = relationship("TrainingPlan", back_populates="sessions", lazy="joined")

    @property
    def is_open(self) -> bool:
        return not self.completed and not self.skipped

    def __repr__(self):
        return f"<PlanSession {self.id} {self.date:%Y-%m-%d} completed={self.completed}>"


class PlanTemplate(Base):
    """
    Reusable plan shape owned by a coach.

    Sessions are stored as day offsets from the plan start, so a template
    can be stamped onto any athlete and any start date.
    """

    __tablename__ = "plan_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration_days = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    sessions = relationship(
        "TemplateSession",
        back_populates="template",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="TemplateSession.day_offset",
    )

    def __repr__(self):
        return f"<PlanTemplate {self.id} {self.name!r}>"


class TemplateSession(Base):
    __tablename__ = "template_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String(36), ForeignKey("plan_templates.id", ondelete="CASCADE"), nullable=False, index=True)

    day_offset = Column(Integer, nullable=False)  # days after the plan start
    session_type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    target_distance = Column(Float, nullable=True)
    target_duration = Column(Integer, nullable=True)
    target_pace = Column(Float, nullable=True)

    template = relationship("PlanTemplate", back_populates="sessions")
