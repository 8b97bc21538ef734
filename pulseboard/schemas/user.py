"""Pydantic schemas for User model validation."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """User role enumeration."""

    MANAGER = "MANAGER"
    TEAM_LEADER = "TEAM_LEADER"
    EMPLOYEE = "EMPLOYEE"
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


# Roles a manager may hand out through the role management screen
ASSIGNABLE_ROLES = (Role.MANAGER, Role.TEAM_LEADER, Role.EMPLOYEE, Role.CLIENT)


class UserSummary(BaseModel):
    """Compact user shape embedded in other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str] = None
    email: str
    role: Role
    profile_image: Optional[str] = None


class UserResponse(UserSummary):
    """Schema for user response."""

    clerk_id: str = Field(
        ...,
        description="External identity provider id",
    )
    skills: List[str] = Field(
        default_factory=list,
        description="Skill tags",
        examples=[["python", "react"]],
    )
    experience: int = Field(0, description="Years of experience")
    task_load: int = Field(0, description="Open assignment count")
    tier: str = Field("Free", description="Billing tier")
    credits: str = Field("Unlimited", description="Billing credits label")
    created_at: datetime
    updated_at: datetime


class UserProfileUpdate(BaseModel):
    """Schema for updating the caller's own profile."""

    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Display name",
    )
    skills: Optional[List[str]] = Field(
        None,
        description="Skill tags",
        examples=[["python", "design"]],
    )
    experience: Optional[int] = Field(
        None,
        ge=0,
        le=80,
        description="Years of experience",
    )
    profile_image: Optional[str] = Field(
        None,
        max_length=500,
        description="Avatar URL",
    )


class UserRoleUpdate(BaseModel):
    """Schema for changing another user's role."""

    role: Role = Field(
        ...,
        description="New role",
        examples=["TEAM_LEADER"],
    )


class RoleResponse(BaseModel):
    """The caller's role."""

    role: Role
