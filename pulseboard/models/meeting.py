"""Meeting and MeetingAttendee SQLAlchemy models."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..database import Base


class Meeting(Base):
    """
    A scheduled meeting attached to a project.

    Attributes:
        id: Unique identifier (UUID)
        title: Meeting title
        description: Agenda
        start_time: Start
        end_time: End
        link: Video call link
        location: Physical location
        status: SCHEDULED, CANCELLED or COMPLETED
        organizer_id: FK to the organizing user
        project_id: FK to the project
        attendees: Invited users with their response status
    """

    __tablename__ = "Meetings"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    title = Column(
        String(255),
        nullable=False,
    )
    description = Column(
        Text,
        nullable=True,
    )
    start_time = Column(
        DateTime,
        nullable=False,
        index=True,
    )
    end_time = Column(
        DateTime,
        nullable=False,
    )
    link = Column(
        String(500),
        nullable=True,
    )
    location = Column(
        String(255),
        nullable=True,
    )
    status = Column(
        String(20),
        nullable=False,
        default="SCHEDULED",
    )
    organizer_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id = Column(
        Uuid,
        ForeignKey("Projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    organizer = relationship(
        "User",
        foreign_keys=[organizer_id],
        lazy="selectin",
    )
    attendees = relationship(
        "MeetingAttendee",
        back_populates="meeting",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation of Meeting."""
        return f"<Meeting(id={self.id}, title={self.title})>"


class MeetingAttendee(Base):
    """An invited user's response to a meeting."""

    __tablename__ = "MeetingAttendees"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    meeting_id = Column(
        Uuid,
        ForeignKey("Meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        String(20),
        nullable=False,
        default="PENDING",
    )

    __table_args__ = (
        UniqueConstraint("meeting_id", "user_id", name="UQ_MeetingAttendees_Meeting_User"),
    )

    meeting = relationship(
        "Meeting",
        back_populates="attendees",
    )
    user = relationship(
        "User",
        foreign_keys=[user_id],
        lazy="selectin",
    )
