"""Pydantic schemas for Campaign model validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CampaignCreate(BaseModel):
    """Schema for creating a campaign."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Spring launch"])
    date: Optional[datetime] = None
    open_rate: float = Field(..., ge=0, le=100, examples=[42.5])
    click_rate: float = Field(..., ge=0, le=100, examples=[7.1])
    recipients: int = Field(..., ge=0, examples=[1200])
    growth: float = Field(..., examples=[3.2])


class CampaignResponse(BaseModel):
    """Schema for campaign response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    date: datetime
    open_rate: float
    click_rate: float
    recipients: int
    growth: float


class CampaignPage(BaseModel):
    """Paginated campaign list."""

    campaigns: List[CampaignResponse]
    total: int
    page: int
    total_pages: int
