"""Pydantic schemas for Notification model validation."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationType(str, Enum):
    """Notification type enumeration."""

    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_ACCEPTED = "TASK_ACCEPTED"
    TASK_DECLINED = "TASK_DECLINED"
    TASK_DUE_TODAY = "TASK_DUE_TODAY"
    TASK_RESCHEDULED = "TASK_RESCHEDULED"
    PROJECT_UPDATED = "PROJECT_UPDATED"
    COMMENT = "COMMENT"
    MEETING = "MEETING"
    MEETING_RESPONSE = "MEETING_RESPONSE"
    SYSTEM = "SYSTEM"


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str = Field(..., examples=["New Task Assignment"])
    message: str
    type: NotificationType
    link: Optional[str] = Field(
        None,
        description="In-app href the notification points to",
        examples=["/dashboards/employee?taskId=..."],
    )
    is_read: bool = False
    created_at: datetime


class NotificationCount(BaseModel):
    """Notification count response."""

    total: int = Field(..., description="Total number of notifications")
    unread: int = Field(..., description="Number of unread notifications")
