"""Campaign SQLAlchemy model for the marketing dashboard."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid

from ..database import Base


class Campaign(Base):
    """An email campaign with its delivery statistics."""

    __tablename__ = "Campaigns"
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
    date = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    open_rate = Column(
        Float,
        nullable=False,
        default=0.0,
    )
    click_rate = Column(
        Float,
        nullable=False,
        default=0.0,
    )
    recipients = Column(
        Integer,
        nullable=False,
        default=0,
    )
    growth = Column(
        Float,
        nullable=False,
        default=0.0,
    )
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
