"""Pydantic schemas for saved third-party connections."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Supported third-party providers."""

    DISCORD = "DISCORD"
    NOTION = "NOTION"
    SLACK = "SLACK"


class ConnectionCreate(BaseModel):
    """Schema for saving a connection after a successful OAuth callback."""

    provider: Provider
    external_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Webhook id, workspace id or team id",
    )
    name: Optional[str] = Field(None, max_length=255)
    access_token: Optional[str] = None
    webhook_url: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ConnectionResponse(BaseModel):
    """Schema for connection response. Tokens are never echoed back."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    provider: Provider
    external_id: str
    name: Optional[str] = None
    webhook_url: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
