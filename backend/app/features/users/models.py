"""
User model.

A user is either a COACH or an ATHLETE. Athletes point at their single
current coach through coach_id; coaches never have one.
"""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from app.models.base import Base
from app.shared.constants import UserRole
from app.shared.dates import utcnow


class User(Base):
    """
    Application user.

    Never hard-deleted. coach_id is changed only by invitation acceptance
    (set) and by the coach removing the athlete (cleared).
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Profile
    name = Column(String(100), nullable=False)
    role = Column(String(10), nullable=False, default=UserRole.ATHLETE.value)
    avatar = Column(String(500), nullable=True)

    # Athlete details
    birth_date = Column(DateTime, nullable=True)
    gender = Column(String(10), nullable=True)
    weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)

    # Heart rate (bpm); zones hold the lower bound of zones 1-5
    hr_max = Column(Integer, nullable=True)
    hr_rest = Column(Integer, nullable=True)
    hr_zone1 = Column(Integer, nullable=True)
    hr_zone2 = Column(Integer, nullable=True)
    hr_zone3 = Column(Integer, nullable=True)
    hr_zone4 = Column(Integer, nullable=True)
    hr_zone5 = Column(Integer, nullable=True)

    # Coach/athlete relationship
    coach_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_coach(self) -> bool:
        return self.role == UserRole.COACH.value

    def __repr__(self):
        return f"<User {self.id} ({self.role})>"
