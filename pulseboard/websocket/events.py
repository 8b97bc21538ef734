"""Real-time event variants and channel names.

Each event the server publishes is one pydantic model, discriminated on its
``event`` literal. Publishers build a variant, so a payload can not be sent
on the wrong event name with the wrong fields; subscribers parse frames back
into the same union with ``parse_event``.

Wire frame::

    {"type": "<event name>", "channel": "<channel>", "data": {...payload}}
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Channel(str, Enum):
    """Broadcast channels shared by all subscribers."""

    PROJECTS = "projects"
    TASKS = "tasks"
    MEMBERS = "members"


NOTIFICATIONS_PREFIX = "notifications-"


def notifications_channel(clerk_id: str) -> str:
    """Private channel carrying one user's notifications."""
    return f"{NOTIFICATIONS_PREFIX}{clerk_id}"


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: ClassVar[Optional[Channel]] = None

    def payload(self) -> dict[str, Any]:
        """JSON-ready payload without the discriminator."""
        return self.model_dump(mode="json", exclude={"event"})

    def to_frame(self, channel: str) -> dict[str, Any]:
        return {"type": self.event, "channel": channel, "data": self.payload()}


# Projects

class ProjectCreated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.PROJECTS
    event: Literal["project-created"] = "project-created"
    project: dict[str, Any]


class ProjectUpdated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.PROJECTS
    event: Literal["project-updated"] = "project-updated"
    project_id: UUID
    updates: dict[str, Any]


class ProjectDeleted(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.PROJECTS
    event: Literal["project-deleted"] = "project-deleted"
    project_id: UUID


class ProjectProgressUpdated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.PROJECTS
    event: Literal["project-progress-updated"] = "project-progress-updated"
    project_id: UUID
    progress: int


# Tasks

class TaskCreated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.TASKS
    event: Literal["task-created"] = "task-created"
    task: dict[str, Any]


class TaskUpdated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.TASKS
    event: Literal["task-updated"] = "task-updated"
    task_id: UUID
    updates: dict[str, Any]


class TaskDeleted(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.TASKS
    event: Literal["task-deleted"] = "task-deleted"
    task_id: UUID


class TaskAssigned(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.TASKS
    event: Literal["task-assigned"] = "task-assigned"
    task_id: UUID
    assignee: dict[str, Any]


class TaskCompleted(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.TASKS
    event: Literal["task-completed"] = "task-completed"
    task_id: UUID


# Members

class MemberAdded(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.MEMBERS
    event: Literal["member-added"] = "member-added"
    member: dict[str, Any]


class MemberRemoved(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.MEMBERS
    event: Literal["member-removed"] = "member-removed"
    member_id: UUID


class MemberRoleUpdated(_Event):
    channel: ClassVar[Optional[Channel]] = Channel.MEMBERS
    event: Literal["member-role-updated"] = "member-role-updated"
    member_id: UUID
    role: str
    member_name: Optional[str] = None


# Notifications (published on the recipient's private channel)

class NewNotification(_Event):
    event: Literal["new-notification"] = "new-notification"
    notification: dict[str, Any]


RealtimeEvent = Annotated[
    Union[
        ProjectCreated,
        ProjectUpdated,
        ProjectDeleted,
        ProjectProgressUpdated,
        TaskCreated,
        TaskUpdated,
        TaskDeleted,
        TaskAssigned,
        TaskCompleted,
        MemberAdded,
        MemberRemoved,
        MemberRoleUpdated,
        NewNotification,
    ],
    Field(discriminator="event"),
]

EVENT_TYPES: tuple[type[_Event], ...] = (
    ProjectCreated,
    ProjectUpdated,
    ProjectDeleted,
    ProjectProgressUpdated,
    TaskCreated,
    TaskUpdated,
    TaskDeleted,
    TaskAssigned,
    TaskCompleted,
    MemberAdded,
    MemberRemoved,
    MemberRoleUpdated,
    NewNotification,
)

EVENT_NAMES: frozenset[str] = frozenset(
    event_type.model_fields["event"].default for event_type in EVENT_TYPES
)

_event_adapter: TypeAdapter = TypeAdapter(RealtimeEvent)


def parse_event(frame: dict[str, Any]):
    """Rebuild the event variant carried by a wire frame.

    Raises:
        pydantic.ValidationError: unknown event name or malformed payload
    """
    return _event_adapter.validate_python({**frame.get("data", {}), "event": frame.get("type")})


def is_known_channel(channel: str) -> bool:
    """True for the shared channels and any per-user notifications channel."""
    if channel.startswith(NOTIFICATIONS_PREFIX):
        return len(channel) > len(NOTIFICATIONS_PREFIX)
    return channel in {c.value for c in Channel}
