"""Pydantic schemas for Comment model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class CommentCreate(BaseModel):
    """Schema for posting a comment on a project."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        examples=["Looks great, please tweak the header colour."],
    )
    project_id: UUID
    rating: Optional[int] = Field(
        None,
        ge=1,
        le=5,
        description="Optional client satisfaction rating",
    )


class CommentResponse(BaseModel):
    """Schema for comment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    content: str
    rating: Optional[int] = None
    project_id: UUID
    author_id: UUID
    author: Optional[UserSummary] = None
    created_at: datetime
