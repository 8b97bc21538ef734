"""Pydantic schemas for Workflow model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .connection import Provider


class WorkflowCreate(BaseModel):
    """Schema for creating a workflow."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Notify on task done"])
    description: Optional[str] = None


class WorkflowPublish(BaseModel):
    """Schema for toggling a workflow live."""

    publish: bool


class WorkflowTemplateUpdate(BaseModel):
    """Schema for saving a provider message template."""

    provider: Provider
    template: str = Field(..., max_length=4000)


class WorkflowResponse(BaseModel):
    """Schema for workflow response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    publish: bool
    discord_template: Optional[str] = None
    notion_template: Optional[str] = None
    slack_template: Optional[str] = None
    created_at: datetime
    updated_at: datetime
