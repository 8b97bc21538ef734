"""Role-based navigation.

``NAVIGATION`` is the single place that lists which screens each role sees,
in sidebar order. Each item names the capability it depends on, and
``navigation_for`` drops any item the policy would refuse, so the sidebar
and the API can not drift apart.
"""

from dataclasses import dataclass

from ..schemas.user import Role
from .policy import Action, Resource, can


@dataclass(frozen=True)
class NavItem:
    """A sidebar entry."""

    path: str
    label: str
    resource: Resource
    action: Action = Action.VIEW


_SHARED_MANAGEMENT = (
    NavItem("/teams", "Teams", Resource.TEAM),
    NavItem("/workflows", "Workflows", Resource.WORKFLOW),
    NavItem("/projects", "Projects", Resource.PROJECT),
    NavItem("/kanban", "Kanban", Resource.TASK),
    NavItem("/connections", "Connections", Resource.CONNECTION),
    NavItem("/dashboards/manager/manage-roles", "Manage Roles", Resource.USER, Action.MANAGE_ROLES),
    NavItem("/settings", "Settings", Resource.SETTINGS),
)

NAVIGATION: dict[Role, tuple[NavItem, ...]] = {
    Role.MANAGER: (
        NavItem("/manager/dashboard", "Dashboard", Resource.DASHBOARD),
        *_SHARED_MANAGEMENT,
    ),
    Role.ADMIN: (
        NavItem("/admin/dashboard", "Dashboard", Resource.DASHBOARD),
        *_SHARED_MANAGEMENT,
    ),
    Role.TEAM_LEADER: (
        NavItem("/dashboards/team-leader", "Dashboard", Resource.DASHBOARD),
        NavItem("/teams", "My Teams", Resource.TEAM),
        NavItem("/workflows", "Workflows", Resource.WORKFLOW),
        NavItem("/projects", "Projects", Resource.PROJECT),
        NavItem("/kanban", "Kanban", Resource.TASK),
        NavItem("/connections", "Connections", Resource.CONNECTION),
        NavItem("/settings", "Settings", Resource.SETTINGS),
    ),
    Role.EMPLOYEE: (
        NavItem("/dashboards/employee", "Dashboard", Resource.DASHBOARD),
        NavItem("/workflows", "My Tasks", Resource.WORKFLOW),
        NavItem("/projects", "Projects", Resource.PROJECT),
        NavItem("/kanban", "Kanban", Resource.TASK),
        NavItem("/connections", "Connections", Resource.CONNECTION),
        NavItem("/settings", "Settings", Resource.SETTINGS),
    ),
    Role.CLIENT: (
        NavItem("/dashboards/client", "Dashboard", Resource.DASHBOARD),
        NavItem("/settings", "Settings", Resource.SETTINGS),
    ),
}


def navigation_for(role: Role) -> list[NavItem]:
    """Sidebar items for ``role``, in order, restricted to what it may do."""
    return [item for item in NAVIGATION.get(role, ()) if can(role, item.action, item.resource)]


def dashboard_path(role: Role) -> str:
    """Landing page for ``role``; the first sidebar entry."""
    items = navigation_for(role)
    return items[0].path if items else "/settings"
