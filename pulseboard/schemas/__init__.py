"""Pydantic schemas package."""

from .billing import BillingResponse, Tier, TierUpdate
from .campaign import CampaignCreate, CampaignPage, CampaignResponse
from .comment import CommentCreate, CommentResponse
from .common import ActionResult, ErrorResponse
from .connection import ConnectionCreate, ConnectionResponse, Provider
from .meeting import (
    AttendeeStatus,
    AttendeeStatusUpdate,
    MeetingCreate,
    MeetingResponse,
    MeetingStatus,
    MeetingStatusUpdate,
)
from .notification import NotificationCount, NotificationResponse, NotificationType
from .project import (
    ProjectCreate,
    ProjectMemberAdd,
    ProjectMemberResponse,
    ProjectProgressUpdate,
    ProjectResponse,
    ProjectUpdate,
)
from .task import (
    CleanupResult,
    SkillAssignRequest,
    SkillAssignResult,
    TaskAssign,
    TaskCreate,
    TaskDecline,
    TaskPage,
    TaskPriority,
    TaskProgressUpdate,
    TaskResponse,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from .team import TeamCreate, TeamResponse, TeamUpdate
from .time_entry import TaskTimeTotal, TimeEntryResponse, TimeEntryStart, TimeReport
from .user import (
    ASSIGNABLE_ROLES,
    Role,
    RoleResponse,
    UserProfileUpdate,
    UserResponse,
    UserRoleUpdate,
    UserSummary,
)
from .workflow import WorkflowCreate, WorkflowPublish, WorkflowResponse, WorkflowTemplateUpdate

__all__ = [
    "ASSIGNABLE_ROLES",
    "ActionResult",
    "AttendeeStatus",
    "AttendeeStatusUpdate",
    "BillingResponse",
    "CampaignCreate",
    "CampaignPage",
    "CampaignResponse",
    "CleanupResult",
    "CommentCreate",
    "CommentResponse",
    "ConnectionCreate",
    "ConnectionResponse",
    "ErrorResponse",
    "MeetingCreate",
    "MeetingResponse",
    "MeetingStatus",
    "MeetingStatusUpdate",
    "NotificationCount",
    "NotificationResponse",
    "NotificationType",
    "ProjectCreate",
    "ProjectMemberAdd",
    "ProjectMemberResponse",
    "ProjectProgressUpdate",
    "ProjectResponse",
    "ProjectUpdate",
    "Provider",
    "Role",
    "RoleResponse",
    "SkillAssignRequest",
    "SkillAssignResult",
    "TaskAssign",
    "TaskCreate",
    "TaskDecline",
    "TaskPage",
    "TaskPriority",
    "TaskProgressUpdate",
    "TaskResponse",
    "TaskStatus",
    "TaskStatusUpdate",
    "TaskTimeTotal",
    "TaskUpdate",
    "TeamCreate",
    "TeamResponse",
    "TeamUpdate",
    "Tier",
    "TierUpdate",
    "TimeEntryResponse",
    "TimeEntryStart",
    "TimeReport",
    "UserProfileUpdate",
    "UserResponse",
    "UserRoleUpdate",
    "UserSummary",
    "WorkflowCreate",
    "WorkflowPublish",
    "WorkflowResponse",
    "WorkflowTemplateUpdate",
]
