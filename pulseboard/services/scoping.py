"""Row visibility filters shared by the task and project services.

Each function returns a SQL condition limiting rows to what ``user`` may
see, or None when the user sees everything.
"""

from typing import Optional

from sqlalchemy import or_, select

from ..models.project import Project
from ..models.task import Task
from ..models.team import Team, TeamMembers
from ..models.user import User
from ..schemas.user import Role


def team_ids_for(user: User):
    """Subquery of team ids the user leads or belongs to."""
    return (
        select(TeamMembers.c.team_id).where(TeamMembers.c.user_id == user.id)
        .union(select(Team.id).where(Team.leader_id == user.id))
    )


def project_visibility(user: User) -> Optional[object]:
    role = user.role
    if role == Role.ADMIN.value:
        return None
    if role == Role.MANAGER.value:
        return Project.manager_id == user.id
    if role == Role.CLIENT.value:
        return Project.client_id == user.id
    return or_(
        Project.team_id.in_(team_ids_for(user)),
        Project.id.in_(select(Task.project_id).where(Task.assignee_id == user.id)),
    )


def task_visibility(user: User) -> Optional[object]:
    role = user.role
    if role in (Role.ADMIN.value, Role.MANAGER.value):
        return None
    if role == Role.CLIENT.value:
        return Task.project_id.in_(select(Project.id).where(Project.client_id == user.id))
    if role == Role.TEAM_LEADER.value:
        teams = team_ids_for(user)
        return or_(
            Task.assignee_id == user.id,
            Task.creator_id == user.id,
            Task.team_id.in_(teams),
            Task.project_id.in_(select(Project.id).where(Project.team_id.in_(team_ids_for(user)))),
        )
    return or_(
        Task.assignee_id == user.id,
        Task.team_id.in_(team_ids_for(user)),
    )
