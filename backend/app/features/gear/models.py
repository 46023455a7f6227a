"""
Gear models.

Models:
- Gear: Shoes, watches and other equipment of one user
- ActivityGear: Which gear was used on which activity

Usage totals are not stored: they are summed from the linked
activities when read, so editing or deleting an activity never leaves
a gear counter behind.
"""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint

from app.models.base import Base
from app.shared.constants import GearStatus
from app.shared.dates import utcnow


class Gear(Base):
    __tablename__ = "gear"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    gear_type = Column(String(20), nullable=False)
    brand = Column(String(50), nullable=False)
    model = Column(String(100), nullable=False)
    name = Column(String(100), nullable=True)  # nickname
    status = Column(String(10), nullable=False, default=GearStatus.ACTIVE.value, index=True)

    max_distance = Column(Float, nullable=True)  # km before replacement
    purchase_date = Column(DateTime, nullable=True)
    retired_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Gear {self.id} {self.brand} {self.model}>"


class ActivityGear(Base):
    __tablename__ = "activity_gear"
    __table_args__ = (
        UniqueConstraint("activity_id", "gear_id", name="uq_activity_gear"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    gear_id = Column(String(36), ForeignKey("gear.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
