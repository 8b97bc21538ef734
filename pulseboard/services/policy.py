"""Role capability policy.

One table answers "may this role perform this action on this kind of
resource?". Every server action asks ``can``/``require`` before it mutates,
and the navigation table is filtered through the same function, so a
screen never shows a link its backing endpoints would refuse.

Row-level rules (only the assignee accepts a task, only the leader of the
task's team reports progress, and so on) are checked by the services after
the capability check passes.
"""

from enum import Enum
from typing import Optional, Union

from ..errors import NotAuthorizedError
from ..schemas.user import Role


class Resource(str, Enum):
    """Kinds of things a role can act on."""

    TASK = "task"
    PROJECT = "project"
    TEAM = "team"
    USER = "user"
    COMMENT = "comment"
    MEETING = "meeting"
    NOTIFICATION = "notification"
    TIME_ENTRY = "time_entry"
    CAMPAIGN = "campaign"
    WORKFLOW = "workflow"
    CONNECTION = "connection"
    BILLING = "billing"
    DASHBOARD = "dashboard"
    SETTINGS = "settings"


class Action(str, Enum):
    """Operations a role can attempt."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    ASSIGN = "assign"
    UNASSIGN = "unassign"
    START = "start"
    ACCEPT = "accept"
    DECLINE = "decline"
    UPDATE_STATUS = "update_status"
    UPDATE_PROGRESS = "update_progress"
    CLEANUP = "cleanup"
    REMIND = "remind"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_ROLES = "manage_roles"
    TRACK = "track"


_EVERYONE = frozenset(Role)
_STAFF = frozenset({Role.MANAGER, Role.TEAM_LEADER, Role.EMPLOYEE, Role.ADMIN})
_LEADS = frozenset({Role.MANAGER, Role.TEAM_LEADER, Role.ADMIN})
_MANAGERS = frozenset({Role.MANAGER, Role.ADMIN})

_POLICY: dict[tuple[Resource, Action], frozenset[Role]] = {
    # Tasks
    (Resource.TASK, Action.VIEW): _EVERYONE,
    (Resource.TASK, Action.CREATE): _LEADS,
    (Resource.TASK, Action.EDIT): _LEADS,
    (Resource.TASK, Action.DELETE): _LEADS,
    (Resource.TASK, Action.ASSIGN): _LEADS,
    (Resource.TASK, Action.UNASSIGN): _LEADS,
    (Resource.TASK, Action.START): _STAFF,
    (Resource.TASK, Action.ACCEPT): _STAFF,
    (Resource.TASK, Action.DECLINE): _STAFF,
    (Resource.TASK, Action.UPDATE_STATUS): _STAFF,
    (Resource.TASK, Action.UPDATE_PROGRESS): _LEADS,
    (Resource.TASK, Action.CLEANUP): _MANAGERS,
    (Resource.TASK, Action.REMIND): _LEADS,
    # Projects
    (Resource.PROJECT, Action.VIEW): _EVERYONE,
    (Resource.PROJECT, Action.CREATE): _MANAGERS,
    (Resource.PROJECT, Action.EDIT): _MANAGERS,
    (Resource.PROJECT, Action.DELETE): _MANAGERS,
    (Resource.PROJECT, Action.MANAGE_MEMBERS): _MANAGERS,
    (Resource.PROJECT, Action.UPDATE_PROGRESS): _LEADS,
    # Teams
    (Resource.TEAM, Action.VIEW): _STAFF,
    (Resource.TEAM, Action.CREATE): _MANAGERS,
    (Resource.TEAM, Action.EDIT): _LEADS,
    # Users
    (Resource.USER, Action.VIEW): _LEADS,
    (Resource.USER, Action.MANAGE_ROLES): _MANAGERS,
    # Collaboration
    (Resource.COMMENT, Action.VIEW): _EVERYONE,
    (Resource.COMMENT, Action.CREATE): _EVERYONE,
    (Resource.MEETING, Action.VIEW): _EVERYONE,
    (Resource.MEETING, Action.CREATE): _EVERYONE,
    (Resource.MEETING, Action.EDIT): _EVERYONE,
    (Resource.NOTIFICATION, Action.VIEW): _EVERYONE,
    (Resource.NOTIFICATION, Action.EDIT): _EVERYONE,
    # Time tracking
    (Resource.TIME_ENTRY, Action.VIEW): _STAFF,
    (Resource.TIME_ENTRY, Action.TRACK): _STAFF,
    # Marketing, automation, integrations
    (Resource.CAMPAIGN, Action.VIEW): _EVERYONE,
    (Resource.CAMPAIGN, Action.CREATE): _EVERYONE,
    (Resource.WORKFLOW, Action.VIEW): _STAFF,
    (Resource.WORKFLOW, Action.CREATE): _STAFF,
    (Resource.WORKFLOW, Action.EDIT): _STAFF,
    (Resource.CONNECTION, Action.VIEW): _STAFF,
    (Resource.CONNECTION, Action.CREATE): _STAFF,
    # Account
    (Resource.BILLING, Action.VIEW): _EVERYONE,
    (Resource.BILLING, Action.EDIT): _EVERYONE,
    (Resource.DASHBOARD, Action.VIEW): _EVERYONE,
    (Resource.SETTINGS, Action.VIEW): _EVERYONE,
}


def _as_role(role: Union[Role, str, None]) -> Optional[Role]:
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return None


def can(role: Union[Role, str, None], action: Action, resource: Resource) -> bool:
    """Return True when ``role`` may perform ``action`` on ``resource``.

    Unknown roles and unlisted (resource, action) pairs are denied.
    """
    role = _as_role(role)
    if role is None:
        return False
    return role in _POLICY.get((resource, action), frozenset())


def require(
    role: Union[Role, str, None],
    action: Action,
    resource: Resource,
    message: Optional[str] = None,
) -> None:
    """Raise NotAuthorizedError unless ``can(role, action, resource)``."""
    if not can(role, action, resource):
        verb = action.value.replace("_", " ")
        raise NotAuthorizedError(message or f"Not authorized to {verb} {resource.value.replace('_', ' ')}")


def allowed_roles(action: Action, resource: Resource) -> frozenset[Role]:
    """Roles granted ``action`` on ``resource``."""
    return _POLICY.get((resource, action), frozenset())
