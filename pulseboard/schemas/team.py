"""Pydantic schemas for Team model validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class TeamCreate(BaseModel):
    """Schema for creating a team."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["Frontend Squad"],
    )
    description: Optional[str] = None
    leader_id: UUID = Field(..., description="ID of the team leader")
    member_ids: List[UUID] = Field(
        default_factory=list,
        description="IDs of the team members",
    )


class TeamUpdate(BaseModel):
    """Schema for updating a team. ``member_ids`` replaces the member set."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    leader_id: Optional[UUID] = None
    member_ids: Optional[List[UUID]] = None


class TeamResponse(BaseModel):
    """Schema for team response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    leader_id: Optional[UUID] = None
    leader: Optional[UserSummary] = None
    members: List[UserSummary] = Field(default_factory=list)
    created_at: datetime
