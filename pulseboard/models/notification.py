"""Notification SQLAlchemy model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid

from ..database import Base


class Notification(Base):
    """
    A message delivered to one user, persisted and pushed in real time.

    Attributes:
        id: Unique identifier (UUID)
        user_id: FK to the recipient
        title: Short title
        message: Body text
        type: Notification type (TASK_ASSIGNED, COMMENT, ...)
        link: Optional in-app href the notification points to
        is_read: Whether the recipient has read it
    """

    __tablename__ = "Notifications"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    user_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(
        String(255),
        nullable=False,
    )
    message = Column(
        Text,
        nullable=False,
    )
    type = Column(
        String(50),
        nullable=False,
    )
    link = Column(
        String(500),
        nullable=True,
    )
    is_read = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("IX_Notifications_UserId_IsRead_CreatedAt", "user_id", "is_read", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation of Notification."""
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
