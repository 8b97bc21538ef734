"""Team SQLAlchemy model and the team membership association table."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base

if TYPE_CHECKING:
    from .user import User


TeamMembers = Table(
    "TeamMembers",
    Base.metadata,
    Column(
        "team_id",
        Uuid,
        ForeignKey("Teams.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Team(Base):
    """
    A named group of users with one leader.

    Attributes:
        id: Unique identifier (UUID)
        name: Team name
        description: Optional description
        leader_id: FK to the leading user (usually a TEAM_LEADER or MANAGER)
        members: Users belonging to the team
    """

    __tablename__ = "Teams"
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
    leader_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="SET NULL"),
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

    leader = relationship(
        "User",
        foreign_keys=[leader_id],
        lazy="selectin",
    )
    members = relationship(
        "User",
        secondary=TeamMembers,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation of Team."""
        return f"<Team(id={self.id}, name={self.name})>"
