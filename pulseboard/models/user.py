"""User SQLAlchemy model mirrored from the external identity provider."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Uuid

from ..database import Base


class User(Base):
    """
    User model representing people who sign in through the identity provider.

    Rows are created and updated by the provider webhook; the only local
    authority over a user is the ``role`` column, which managers edit.

    Attributes:
        id: Unique identifier (UUID)
        clerk_id: External identity provider user id (unique)
        email: User's email address (unique)
        name: Display name
        profile_image: URL to the user's avatar
        role: MANAGER, TEAM_LEADER, EMPLOYEE, CLIENT or ADMIN
        skills: List of skill tags used by skill-based assignment
        experience: Years of experience, tie-breaker for skill assignment
        task_load: Number of open assignments, primary sort for skill assignment
        tier: Billing tier (Free, Pro, Unlimited)
        credits: Billing credits label
    """

    __tablename__ = "Users"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    clerk_id = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name = Column(
        String(255),
        nullable=True,
    )
    profile_image = Column(
        String(500),
        nullable=True,
    )
    role = Column(
        String(20),
        nullable=False,
        default="CLIENT",
        index=True,
    )

    # Skill-based assignment inputs
    skills = Column(
        JSON,
        nullable=False,
        default=list,
    )
    experience = Column(
        Integer,
        nullable=False,
        default=0,
    )
    task_load = Column(
        Integer,
        nullable=False,
        default=0,
    )

    # Billing display
    tier = Column(
        String(20),
        nullable=False,
        default="Free",
    )
    credits = Column(
        String(50),
        nullable=False,
        default="Unlimited",
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

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, clerk_id={self.clerk_id}, role={self.role})>"
