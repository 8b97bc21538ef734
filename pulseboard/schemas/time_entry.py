"""Pydantic schemas for TimeEntry model validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TimeEntryStart(BaseModel):
    """Schema for starting time tracking on a task."""

    description: Optional[str] = Field(
        None,
        max_length=2000,
        examples=["Working on layout"],
    )


class TimeEntryResponse(BaseModel):
    """Schema for time entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    task_id: UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    description: Optional[str] = None
    duration_seconds: Optional[int] = Field(
        None,
        description="Elapsed seconds; null while the entry is open",
    )


class TaskTimeTotal(BaseModel):
    """Tracked seconds for one task."""

    task_id: UUID
    title: str
    total_seconds: int


class TimeReport(BaseModel):
    """Tracked time of the caller, grouped by task."""

    tasks: List[TaskTimeTotal]
    total_seconds: int
