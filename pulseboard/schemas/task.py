"""Pydantic schemas for Task model validation."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class TaskStatus(str, Enum):
    """Canonical task status enumeration."""

    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskBase(BaseModel):
    """Base schema with common task fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Task title",
        examples=["Design landing page"],
    )
    description: Optional[str] = Field(
        None,
        description="Detailed task description",
    )
    priority: TaskPriority = Field(
        TaskPriority.MEDIUM,
        description="Priority level",
        examples=["HIGH"],
    )
    deadline: Optional[datetime] = Field(
        None,
        description="Due date",
    )


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    project_id: Optional[UUID] = Field(
        None,
        description="ID of the parent project",
    )
    assignee_id: Optional[UUID] = Field(
        None,
        description="ID of the assigned user",
    )
    required_skills: List[str] = Field(
        default_factory=list,
        description="Skills used by skill-based assignment",
    )


class TaskUpdate(BaseModel):
    """Schema for editing a task. All fields optional."""

    title: Optional[str] = Field(
        None,
        min_length=1,
        max_length=500,
    )
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    project_id: Optional[UUID] = None
    assignee_id: Optional[UUID] = None
    required_skills: Optional[List[str]] = None


class TaskAssign(BaseModel):
    """Schema for assigning a task."""

    assignee_id: UUID = Field(
        ...,
        description="ID of the user to assign",
    )


class TaskDecline(BaseModel):
    """Schema for declining a task."""

    reason: Optional[str] = Field(
        None,
        max_length=2000,
        description="Why the assignee declines; required",
        examples=["Out of office this week"],
    )


class TaskStatusUpdate(BaseModel):
    """Schema for moving a task to another status."""

    status: TaskStatus


class TaskProgressUpdate(BaseModel):
    """Schema for reporting task progress."""

    progress: int = Field(
        ...,
        ge=0,
        le=100,
        description="Completion percentage",
        examples=[40],
    )


class SkillAssignRequest(BaseModel):
    """Schema for skill-based team assignment."""

    task_id: UUID
    required_skills: List[str] = Field(
        ...,
        min_length=1,
        description="Skills an eligible user must share at least one of",
        examples=[["python", "sql"]],
    )


class TaskResponse(TaskBase):
    """Schema for task response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: TaskStatus
    progress: int = 0
    project_id: Optional[UUID] = None
    assignee_id: Optional[UUID] = None
    creator_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    required_skills: List[str] = Field(default_factory=list)
    accepted: bool = False
    decline_reason: Optional[str] = None
    assignee: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class TaskPage(BaseModel):
    """Paginated task list."""

    tasks: List[TaskResponse]
    total: int
    page: int
    total_pages: int


class CleanupResult(BaseModel):
    """Outcome of an orphaned-assignee sweep."""

    success: bool = True
    unassigned_tasks: List[UUID]
    message: str


class SkillAssignResult(BaseModel):
    """Outcome of skill-based assignment."""

    task_id: UUID
    team_id: UUID
    leader_id: UUID
    member_ids: List[UUID]
