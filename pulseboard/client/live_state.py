"""Client-side view of realtime state.

``LiveState`` keeps projects, tasks and members keyed by id and applies
incoming frames to them. Every event variant has a handler in ``_HANDLERS``;
the table is checked when this module is imported, so adding a variant
without a handler fails immediately instead of silently dropping events.
"""

import logging
from typing import Any, Callable, Optional

from ..websocket.events import (
    EVENT_TYPES,
    MemberAdded,
    MemberRemoved,
    MemberRoleUpdated,
    NewNotification,
    ProjectCreated,
    ProjectDeleted,
    ProjectProgressUpdated,
    ProjectUpdated,
    TaskAssigned,
    TaskCompleted,
    TaskCreated,
    TaskDeleted,
    TaskUpdated,
    parse_event,
)
from .toast import ToastDebouncer

logger = logging.getLogger(__name__)


class LiveState:
    def __init__(self, toasts: Optional[ToastDebouncer] = None) -> None:
        self.projects: dict[str, dict[str, Any]] = {}
        self.tasks: dict[str, dict[str, Any]] = {}
        self.members: dict[str, dict[str, Any]] = {}
        self.notifications: list[dict[str, Any]] = []
        self.toasts = toasts or ToastDebouncer()

    def handle(self, frame: dict[str, Any]) -> Optional[str]:
        """
        Apply one wire frame.

        Returns:
            The toast text that was shown, or None when there was no toast
            or it was suppressed as a duplicate.
        """
        event = parse_event(frame)
        message = _HANDLERS[type(event)](self, event)
        logger.debug(f"Applied {event.event} from channel {frame.get('channel')}")
        if message and self.toasts.show(message):
            return message
        return None

    # Projects

    def _project_created(self, event: ProjectCreated) -> str:
        project = dict(event.project)
        self.projects[str(project["id"])] = project
        return f'Project "{project.get("name", "")}" created'

    def _project_updated(self, event: ProjectUpdated) -> str:
        self.projects.setdefault(str(event.project_id), {"id": str(event.project_id)}).update(event.updates)
        return "Project updated"

    def _project_deleted(self, event: ProjectDeleted) -> str:
        self.projects.pop(str(event.project_id), None)
        return "Project deleted"

    def _project_progress(self, event: ProjectProgressUpdated) -> None:
        project = self.projects.get(str(event.project_id))
        if project is not None:
            project["progress"] = event.progress
        return None

    # Tasks

    def _task_created(self, event: TaskCreated) -> str:
        task = dict(event.task)
        self.tasks[str(task["id"])] = task
        return f'Task "{task.get("title", "")}" created'

    def _task_updated(self, event: TaskUpdated) -> str:
        self.tasks.setdefault(str(event.task_id), {"id": str(event.task_id)}).update(event.updates)
        return "Task updated"

    def _task_deleted(self, event: TaskDeleted) -> str:
        self.tasks.pop(str(event.task_id), None)
        return "Task deleted"

    def _task_assigned(self, event: TaskAssigned) -> str:
        task = self.tasks.setdefault(str(event.task_id), {"id": str(event.task_id)})
        task["assignee"] = dict(event.assignee)
        task["assignee_id"] = event.assignee.get("id")
        name = event.assignee.get("name") or event.assignee.get("email") or "someone"
        return f"Task assigned to {name}"

    def _task_completed(self, event: TaskCompleted) -> str:
        task = self.tasks.get(str(event.task_id))
        if task is not None:
            task["status"] = "DONE"
        return "Task completed"

    # Members

    def _member_added(self, event: MemberAdded) -> str:
        member = dict(event.member)
        self.members[str(member["id"])] = member
        return "Member added"

    def _member_removed(self, event: MemberRemoved) -> str:
        self.members.pop(str(event.member_id), None)
        return "Member removed"

    def _member_role_updated(self, event: MemberRoleUpdated) -> str:
        member = self.members.setdefault(str(event.member_id), {"id": str(event.member_id)})
        member["role"] = event.role
        return f"{event.member_name or 'Member'} is now {event.role}"

    # Notifications

    def _new_notification(self, event: NewNotification) -> str:
        self.notifications.insert(0, dict(event.notification))
        return event.notification.get("title") or "New notification"


_HANDLERS: dict[type, Callable[[LiveState, Any], Optional[str]]] = {
    ProjectCreated: LiveState._project_created,
    ProjectUpdated: LiveState._project_updated,
    ProjectDeleted: LiveState._project_deleted,
    ProjectProgressUpdated: LiveState._project_progress,
    TaskCreated: LiveState._task_created,
    TaskUpdated: LiveState._task_updated,
    TaskDeleted: LiveState._task_deleted,
    TaskAssigned: LiveState._task_assigned,
    TaskCompleted: LiveState._task_completed,
    MemberAdded: LiveState._member_added,
    MemberRemoved: LiveState._member_removed,
    MemberRoleUpdated: LiveState._member_role_updated,
    NewNotification: LiveState._new_notification,
}


def check_handlers(handlers: dict[type, Any]) -> None:
    """Raise RuntimeError unless every event variant has a handler."""
    missing = [event_type.__name__ for event_type in EVENT_TYPES if event_type not in handlers]
    if missing:
        raise RuntimeError(f"LiveState has no handler for: {', '.join(missing)}")


check_handlers(_HANDLERS)
