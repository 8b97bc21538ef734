"""Pydantic schemas for Meeting model validation."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .user import UserSummary


class MeetingStatus(str, Enum):
    """Meeting status enumeration."""

    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class AttendeeStatus(str, Enum):
    """Attendee response enumeration."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class MeetingCreate(BaseModel):
    """Schema for scheduling a meeting."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Sprint review"])
    description: Optional[str] = None
    project_id: UUID
    start_time: datetime
    end_time: datetime
    link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_time_range(self) -> "MeetingCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AttendeeStatusUpdate(BaseModel):
    """Schema for answering a meeting invitation."""

    status: AttendeeStatus


class MeetingStatusUpdate(BaseModel):
    """Schema for changing a meeting's status."""

    status: MeetingStatus


class AttendeeResponse(BaseModel):
    """An invited user and their answer."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    status: AttendeeStatus
    user: Optional[UserSummary] = None


class MeetingResponse(BaseModel):
    """Schema for meeting response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    project_id: UUID
    organizer_id: UUID
    start_time: datetime
    end_time: datetime
    link: Optional[str] = None
    location: Optional[str] = None
    status: MeetingStatus
    attendees: List[AttendeeResponse] = Field(default_factory=list)
    created_at: datetime
