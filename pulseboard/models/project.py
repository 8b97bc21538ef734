"""Project SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base

if TYPE_CHECKING:
    from .team import Team
    from .user import User


class Project(Base):
    """
    A unit of client work owned by a manager and executed by a team.

    Attributes:
        id: Unique identifier (UUID)
        name: Project name
        description: Optional description
        type: Free-form project type label
        status: Free-form status label (PLANNING, ACTIVE, COMPLETED, ...)
        progress: Completion percentage 0-100
        start_date: Planned start
        end_date: Planned end
        manager_id: FK to the managing user
        client_id: FK to the client user (nullable)
        team_id: FK to the executing team (nullable)
    """

    __tablename__ = "Projects"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    name = Column(
        String(255),
        nullable=False,
    )
    description = Column(
        Text,
        nullable=True,
    )
    type = Column(
        String(100),
        nullable=True,
    )
    status = Column(
        String(50),
        nullable=False,
        default="PLANNING",
    )
    progress = Column(
        Integer,
        nullable=False,
        default=0,
    )
    start_date = Column(
        DateTime,
        nullable=True,
    )
    end_date = Column(
        DateTime,
        nullable=True,
    )

    manager_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    client_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    team_id = Column(
        Uuid,
        ForeignKey("Teams.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
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

    manager = relationship(
        "User",
        foreign_keys=[manager_id],
        lazy="selectin",
    )
    client = relationship(
        "User",
        foreign_keys=[client_id],
        lazy="selectin",
    )
    team = relationship(
        "Team",
        foreign_keys=[team_id],
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation of Project."""
        return f"<Project(id={self.id}, name={self.name})>"
