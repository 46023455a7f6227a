"""
Direct message model.
"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, JSON, String, Text

from app.models.base import Base
from app.shared.dates import utcnow


class Message(Base):
    """
    Directed message sender -> receiver.

    Legal only while one of the two coaches the other (checked at send
    time). read_at is set once, when the receiver reads the batch.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_pair_unread", "sender_id", "receiver_id", "read_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    content = Column(Text, nullable=False, default="")
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="SET NULL"), nullable=True)

    # [{"userId": ..., "emoji": ...}], at most one entry per user
    reactions = Column(JSON, nullable=False, default=list)

    sent_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    read_at = Column(DateTime, nullable=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def __repr__(self):
        return f"<Message {self.id} {self.sender_id}->{self.receiver_id}>"
