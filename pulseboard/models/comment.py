"""Comment SQLAlchemy model for project discussion and client feedback."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base


class Comment(Base):
    """
    A comment on a project, optionally carrying a 1-5 rating (client feedback).

    Attributes:
        id: Unique identifier (UUID)
        content: Comment body
        rating: Optional rating 1-5
        author_id: FK to the author
        project_id: FK to the project
    """

    __tablename__ = "Comments"
    __allow_unmapped__ = True

    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    content = Column(
        Text,
        nullable=False,
    )
    rating = Column(
        Integer,
        nullable=True,
    )
    author_id = Column(
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

    __table_args__ = (
        Index("IX_Comments_ProjectId_CreatedAt", "project_id", "created_at"),
    )

    author = relationship(
        "User",
        foreign_keys=[author_id],
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation of Comment."""
        return f"<Comment(id={self.id}, project_id={self.project_id})>"
