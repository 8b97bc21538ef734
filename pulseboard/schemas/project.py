"""Pydantic schemas for Project model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class ProjectBase(BaseModel):
    """Base schema with common project fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Project name",
        examples=["Website Redesign"],
    )
    description: Optional[str] = Field(
        None,
        description="Project description",
    )
    type: Optional[str] = Field(
        None,
        max_length=100,
        description="Project type label",
        examples=["Web"],
    )
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProjectCreate(ProjectBase):
    """Schema for creating a project."""

    client_id: Optional[UUID] = Field(
        None,
        description="ID of the client user",
    )


class ProjectUpdate(BaseModel):
    """Schema for updating a project. All fields optional."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=50, examples=["ACTIVE"])
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    client_id: Optional[UUID] = None


class ProjectProgressUpdate(BaseModel):
    """Schema for a manual progress override."""

    progress: int = Field(..., ge=0, le=100)


class ProjectMemberAdd(BaseModel):
    """Schema for adding a member to the project's team."""

    user_id: UUID


class ProjectResponse(ProjectBase):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    progress: int
    manager_id: UUID
    client_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    manager: Optional[UserSummary] = None
    client: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class ProjectMemberResponse(UserSummary):
    """A project team member with their task counters on this project."""

    assigned_tasks: int = 0
    completed_tasks: int = 0
