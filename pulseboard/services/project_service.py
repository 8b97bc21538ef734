"""Project server actions: CRUD, progress and team membership."""

import logging
import math
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import ConflictError, NotAuthorizedError, NotFoundError, ValidationFailedError
from ..models.comment import Comment
from ..models.meeting import Meeting, MeetingAttendee
from ..models.project import Project
from ..models.task import Task
from ..models.team import Team
from ..models.time_entry import TimeEntry
from ..models.user import User
from ..schemas.project import ProjectCreate, ProjectMemberResponse, ProjectResponse, ProjectUpdate
from ..schemas.task import TaskStatus
from ..schemas.user import Role, UserSummary
from ..websocket.events import (
    MemberAdded,
    MemberRemoved,
    ProjectCreated,
    ProjectDeleted,
    ProjectProgressUpdated,
    ProjectUpdated,
)
from ..websocket.handlers import Broadcaster, get_broadcaster
from .policy import Action, Resource, require
from .scoping import project_visibility

logger = logging.getLogger(__name__)


def progress_from_counts(done: int, total: int) -> int:
    """Percentage of done tasks, rounded half up; 0 for an empty project."""
    if total <= 0:
        return 0
    return int(math.floor(done * 100 / total + 0.5))


async def recalculate_progress(
    db: AsyncSession,
    broadcaster: Broadcaster,
    project_id: Optional[UUID],
) -> Optional[int]:
    """
    Recompute a project's progress from its tasks and publish a change.

    Overwrites any manual progress value. Returns the new progress, or None
    when the project does not exist.
    """
    if project_id is None:
        return None

    project = await db.get(Project, project_id)
    if project is None:
        return None

    row = (
        await db.execute(
            select(
                func.count(Task.id),
                func.coalesce(func.sum(case((Task.status == TaskStatus.DONE.value, 1), else_=0)), 0),
            ).where(Task.project_id == project_id)
        )
    ).one()
    total, done = int(row[0]), int(row[1])
    progress = progress_from_counts(done, total)

    if project.progress != progress:
        project.progress = progress
        await db.commit()
        await broadcaster.publish(ProjectProgressUpdated(project_id=project_id, progress=progress))
        logger.info(f"Project progress recalculated: project={project_id}, progress={progress}")

    return progress


class ProjectService:
    """Project actions on behalf of an authenticated user."""

    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    async def _load(self, project_id: UUID) -> Optional[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _load_owned(self, actor: User, project_id: UUID) -> Project:
        """Load a project the actor manages (admins manage everything)."""
        project = await self._load(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if actor.role != Role.ADMIN.value and project.manager_id != actor.id:
            raise NotAuthorizedError("Not authorized to modify this project")
        return project

    async def _get_client(self, client_id: Optional[UUID]) -> Optional[User]:
        if client_id is None:
            return None
        client = await self.db.get(User, client_id)
        if client is None:
            raise NotFoundError("Client not found")
        return client

    async def create_project(self, actor: User, data: ProjectCreate) -> Project:
        """Create a project managed by the actor, with a fresh team led by them."""
        require(actor.role, Action.CREATE, Resource.PROJECT, "Not authorized to create projects")
        await self._get_client(data.client_id)

        team = Team(
            name=f"{data.name} Team",
            description=f"Team for project {data.name}",
            leader_id=actor.id,
            members=[actor],
        )
        project = Project(
            name=data.name,
            description=data.description,
            type=data.type,
            start_date=data.start_date,
            end_date=data.end_date,
            manager_id=actor.id,
            client_id=data.client_id,
            team=team,
        )
        self.db.add(project)
        await self.db.commit()

        project = await self._load(project.id)
        logger.info(f"Project created: id={project.id}, manager={actor.id}")

        await self.broadcaster.publish(
            ProjectCreated(project=ProjectResponse.model_validate(project).model_dump(mode="json"))
        )
        return project

    async def list_projects(self, actor: User) -> list[Project]:
        stmt = select(Project)
        condition = project_visibility(actor)
        if condition is not None:
            stmt = stmt.where(condition)
        result = await self.db.execute(stmt.order_by(Project.created_at.desc()))
        return list(result.scalars().all())

    async def get_project(self, actor: User, project_id: UUID) -> Project:
        stmt = select(Project).where(Project.id == project_id)
        condition = project_visibility(actor)
        if condition is not None:
            stmt = stmt.where(condition)
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def update_project(self, actor: User, project_id: UUID, changes: ProjectUpdate) -> Project:
        require(actor.role, Action.EDIT, Resource.PROJECT, "Not authorized to edit projects")
        project = await self._load_owned(actor, project_id)

        updates = changes.model_dump(exclude_unset=True)
        if "client_id" in updates:
            await self._get_client(updates["client_id"])
        for field, value in updates.items():
            setattr(project, field, value)

        await self.db.commit()
        project = await self._load(project_id)

        await self.broadcaster.publish(
            ProjectUpdated(project_id=project_id, updates=changes.model_dump(mode="json", exclude_unset=True))
        )
        return project

    async def delete_project(self, actor: User, project_id: UUID) -> None:
        """Delete a project with its tasks, comments and meetings."""
        require(actor.role, Action.DELETE, Resource.PROJECT, "Not authorized to delete projects")
        project = await self._load_owned(actor, project_id)

        task_ids = select(Task.id).where(Task.project_id == project_id)
        meeting_ids = select(Meeting.id).where(Meeting.project_id == project_id)
        await self.db.execute(delete(TimeEntry).where(TimeEntry.task_id.in_(task_ids)))
        await self.db.execute(delete(Task).where(Task.project_id == project_id))
        await self.db.execute(delete(Comment).where(Comment.project_id == project_id))
        await self.db.execute(delete(MeetingAttendee).where(MeetingAttendee.meeting_id.in_(meeting_ids)))
        await self.db.execute(delete(Meeting).where(Meeting.project_id == project_id))
        await self.db.delete(project)
        await self.db.commit()

        logger.info(f"Project deleted: id={project_id}, by={actor.id}")
        await self.broadcaster.publish(ProjectDeleted(project_id=project_id))

    async def update_progress(self, actor: User, project_id: UUID, progress: int) -> Project:
        """Manual progress override; replaced on the next task status change."""
        require(actor.role, Action.UPDATE_PROGRESS, Resource.PROJECT, "Not authorized to update project progress")
        if progress < 0 or progress > 100:
            raise ValidationFailedError("Progress must be between 0 and 100")

        if actor.role == Role.TEAM_LEADER.value:
            project = await self._load(project_id)
            if project is None:
                raise NotFoundError("Project not found")
            if project.team is None or project.team.leader_id != actor.id:
                raise NotAuthorizedError("Only the project's team leader can update its progress")
        else:
            project = await self._load_owned(actor, project_id)

        project.progress = progress
        await self.db.commit()

        await self.broadcaster.publish(ProjectProgressUpdated(project_id=project_id, progress=progress))
        return project

    async def list_members(self, actor: User, project_id: UUID) -> list[ProjectMemberResponse]:
        """Team members with their assigned and completed task counts on this project."""
        project = await self.get_project(actor, project_id)
        if project.team is None:
            return []

        counts = (
            await self.db.execute(
                select(
                    Task.assignee_id,
                    func.count(Task.id),
                    func.sum(case((Task.status == TaskStatus.DONE.value, 1), else_=0)),
                )
                .where(Task.project_id == project_id, Task.assignee_id.is_not(None))
                .group_by(Task.assignee_id)
            )
        ).all()
        by_user = {row[0]: (int(row[1]), int(row[2] or 0)) for row in counts}

        members = []
        for member in project.team.members:
            assigned, completed = by_user.get(member.id, (0, 0))
            members.append(
                ProjectMemberResponse(
                    **UserSummary.model_validate(member).model_dump(),
                    assigned_tasks=assigned,
                    completed_tasks=completed,
                )
            )
        return members

    async def add_member(self, actor: User, project_id: UUID, user_id: UUID) -> User:
        require(actor.role, Action.MANAGE_MEMBERS, Resource.PROJECT, "Not authorized to manage project members")
        project = await self._load_owned(actor, project_id)

        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        if project.team is None:
            project.team = Team(
                name=f"{project.name} Team",
                leader_id=project.manager_id,
                members=[],
            )
        if any(member.id == user.id for member in project.team.members):
            raise ConflictError("User is already a member of this project")

        project.team.members.append(user)
        await self.db.commit()

        member = UserSummary.model_validate(user).model_dump(mode="json")
        await self.broadcaster.publish(MemberAdded(member={**member, "project_id": str(project_id)}))
        return user

    async def remove_member(self, actor: User, project_id: UUID, user_id: UUID) -> None:
        require(actor.role, Action.MANAGE_MEMBERS, Resource.PROJECT, "Not authorized to manage project members")
        project = await self._load_owned(actor, project_id)

        team = project.team
        member = next((m for m in team.members if m.id == user_id), None) if team else None
        if member is None:
            raise NotFoundError("Member not found")

        team.members.remove(member)
        await self.db.commit()

        await self.broadcaster.publish(MemberRemoved(member_id=user_id))


def get_project_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> ProjectService:
    """FastAPI dependency for ProjectService."""
    return ProjectService(db, broadcaster)
