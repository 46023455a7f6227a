"""
Invitation model.

A single-use code minted by a coach. The athlete who registers with it
becomes that coach's athlete.
"""

import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey

from app.models.base import Base
from app.shared.constants import InvitationStatus
from app.shared.dates import utcnow


class Invitation(Base):
    """
    Coach invitation.

    Status only moves PENDING -> ACCEPTED | EXPIRED | CANCELLED. Every
    transition is a conditional UPDATE guarded by status = 'PENDING'.
    """

    __tablename__ = "invitations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    code = Column(String(16), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)  # optional addressee, informational only

    status = Column(String(10), nullable=False, default=InvitationStatus.PENDING.value)
    expires_at = Column(DateTime, nullable=False)

    # Consumption
    used_at = Column(DateTime, nullable=True)
    used_by_email = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING.value

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or utcnow())

    def __repr__(self):
        return f"<Invitation {self.code} {self.status}>"
