"""Task SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base

if TYPE_CHECKING:
    from .project import Project
    from .team import Team
    from .user import User


class Task(Base):
    """
    A unit of work, optionally inside a project and assigned to one user.

    Attributes:
        id: Unique identifier (UUID)
        title: Task title
        description: Detailed description
        status: PENDING, ASSIGNED, ACCEPTED, DECLINED, IN_PROGRESS or DONE
        priority: LOW, MEDIUM or HIGH
        deadline: Due date/time
        progress: Completion percentage 0-100, set by the team leader
        assignee_id: FK to the assigned user (nullable)
        creator_id: FK to the creating user
        project_id: FK to the parent project (nullable)
        team_id: FK to the team built by skill assignment (nullable)
        required_skills: Skill tags used by skill assignment
        accepted: Whether the assignee accepted the task
        decline_reason: Reason given when the assignee declined
    """

    __tablename__ = "Tasks"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )

    title = Column(
        String(500),
        nullable=False,
    )
    description = Column(
        Text,
        nullable=True,
    )
    status = Column(
        String(20),
        nullable=False,
        default="PENDING",
        index=True,
    )
    priority = Column(
        String(20),
        nullable=False,
        default="MEDIUM",
    )
    deadline = Column(
        DateTime,
        nullable=True,
    )
    progress = Column(
        Integer,
        nullable=False,
        default=0,
    )

    assignee_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    creator_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    project_id = Column(
        Uuid,
        ForeignKey("Projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    team_id = Column(
        Uuid,
        ForeignKey("Teams.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    required_skills = Column(
        JSON,
        nullable=False,
        default=list,
    )
    accepted = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    decline_reason = Column(
        Text,
        nullable=True,
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("IX_Tasks_ProjectId_Status", "project_id", "status"),
    )

    assignee = relationship(
        "User",
        foreign_keys=[assignee_id],
        lazy="selectin",
    )
    creator = relationship(
        "User",
        foreign_keys=[creator_id],
        lazy="selectin",
    )
    project = relationship(
        "Project",
        foreign_keys=[project_id],
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation of Task."""
        return f"<Task(id={self.id}, title={self.title}, status={self.status})>"
