"""Connection SQLAlchemy model for saved third-party integrations."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid

from ..database import Base


class Connection(Base):
    """
    A Discord webhook, Notion workspace or Slack workspace linked by a user.

    Attributes:
        provider: DISCORD, NOTION or SLACK
        external_id: Provider-side id (webhook id, workspace id, team id)
        name: Human-readable label (channel, workspace or team name)
        access_token: OAuth token where the provider issues one
        webhook_url: Incoming webhook URL (Discord)
        details: Remaining provider fields from the OAuth callback
    """

    __tablename__ = "Connections"
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
    provider = Column(
        String(20),
        nullable=False,
    )
    external_id = Column(
        String(255),
        nullable=False,
    )
    name = Column(
        String(255),
        nullable=True,
    )
    access_token = Column(
        Text,
        nullable=True,
    )
    webhook_url = Column(
        Text,
        nullable=True,
    )
    details = Column(
        JSON,
        nullable=False,
        default=dict,
    )
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "provider", "external_id", name="UQ_Connections_User_Provider_External"),
    )
