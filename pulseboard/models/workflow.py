"""Workflow SQLAlchemy model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid

from ..database import Base


class Workflow(Base):
    """
    A user-defined automation that posts messages to connected services.

    Templates are stored per provider; ``publish`` toggles whether the
    workflow is live.
    """

    __tablename__ = "Workflows"
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
    name = Column(
        String(255),
        nullable=False,
    )
    description = Column(
        Text,
        nullable=True,
    )
    publish = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    discord_template = Column(
        Text,
        nullable=True,
    )
    notion_template = Column(
        Text,
        nullable=True,
    )
    slack_template = Column(
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
