"""TimeEntry SQLAlchemy model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid, text
from sqlalchemy.orm import relationship

from ..database import Base


class TimeEntry(Base):
    """
    A stretch of time a user spent on a task.

    An entry with ``end_time`` NULL is open. The partial unique index below
    allows at most one open entry per user, so two concurrent starts cannot
    both succeed.
    """

    __tablename__ = "TimeEntries"
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
    task_id = Column(
        Uuid,
        ForeignKey("Tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    end_time = Column(
        DateTime,
        nullable=True,
    )
    description = Column(
        Text,
        nullable=True,
    )

    __table_args__ = (
        Index(
            "UQ_TimeEntries_OpenPerUser",
            "user_id",
            unique=True,
            postgresql_where=text("end_time IS NULL"),
            sqlite_where=text("end_time IS NULL"),
        ),
    )

    user = relationship(
        "User",
        foreign_keys=[user_id],
        lazy="selectin",
    )

    @property
    def duration_seconds(self):
        """Elapsed seconds for a closed entry, None while it is still open."""
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time).total_seconds())

    def __repr__(self) -> str:
        """String representation of TimeEntry."""
        return f"<TimeEntry(id={self.id}, user_id={self.user_id}, task_id={self.task_id})>"
