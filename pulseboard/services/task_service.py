"""Task server actions.

Each action follows the same sequence: the caller is already authenticated,
the target is loaded, the policy is checked, the row is mutated and
committed, and only then are notifications written and events broadcast.
Side effects never undo the committed change.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotAuthorizedError, NotFoundError, ValidationFailedError
from ..models.project import Project
from ..models.task import Task
from ..models.team import Team
from ..models.user import User
from ..schemas.task import (
    CleanupResult,
    TaskCreate,
    TaskPage,
    TaskPriority,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
)
from ..schemas.user import Role, UserSummary
from ..websocket.events import TaskAssigned, TaskCompleted, TaskCreated, TaskDeleted, TaskUpdated
from ..websocket.handlers import Broadcaster, get_broadcaster
from .notification_service import NotificationService
from .policy import Action, Resource, require
from .project_service import recalculate_progress
from .scoping import task_visibility

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _task_payload(task: Task) -> dict:
    return TaskResponse.model_validate(task).model_dump(mode="json")


class TaskService:
    """Task actions on behalf of an authenticated user."""

    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    async def _load(self, task_id: UUID) -> Task:
        result = await self.db.execute(
            select(Task)
            .where(Task.id == task_id)
            .execution_options(populate_existing=True)
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def _ensure_project(self, project_id: Optional[UUID]) -> None:
        if project_id is not None and await self.db.get(Project, project_id) is None:
            raise NotFoundError("Project not found")

    async def _get_assignee(self, assignee_id: UUID) -> User:
        assignee = await self.db.get(User, assignee_id)
        if assignee is None:
            raise NotFoundError("Assigned user not found")
        return assignee

    def _require_assignee(self, actor: User, task: Task, verb: str) -> None:
        if task.assignee_id != actor.id:
            raise NotAuthorizedError(f"Not authorized to {verb} this task")

    async def _leads_task_team(self, actor: User, task: Task) -> bool:
        """True when the actor leads the task's team or its project's team."""
        team_ids = [task.team_id]
        if task.project is not None:
            team_ids.append(task.project.team_id)
        team_ids = [team_id for team_id in team_ids if team_id is not None]
        if not team_ids:
            return False
        leader = await self.db.scalar(
            select(Team.id).where(Team.id.in_(team_ids), Team.leader_id == actor.id).limit(1)
        )
        return leader is not None

    async def _announce_assignment(self, task: Task, assignee: User, actor: User) -> None:
        await NotificationService.notify_task_assigned(self.db, self.broadcaster, task, assignee, actor)
        await self.broadcaster.publish(
            TaskAssigned(
                task_id=task.id,
                assignee=UserSummary.model_validate(assignee).model_dump(mode="json"),
            )
        )

    async def _announce_update(self, task: Task, updates: dict) -> None:
        await self.broadcaster.publish(TaskUpdated(task_id=task.id, updates=updates))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_task(self, actor: User, data: TaskCreate) -> Task:
        require(actor.role, Action.CREATE, Resource.TASK, "Not authorized to create tasks")
        await self._ensure_project(data.project_id)
        assignee = await self._get_assignee(data.assignee_id) if data.assignee_id else None

        task = Task(
            title=data.title,
            description=data.description,
            priority=data.priority.value,
            deadline=data.deadline,
            project_id=data.project_id,
            assignee_id=data.assignee_id,
            creator_id=actor.id,
            required_skills=list(data.required_skills),
            status=(TaskStatus.ASSIGNED if assignee else TaskStatus.PENDING).value,
        )
        self.db.add(task)
        await self.db.commit()

        task = await self._load(task.id)
        logger.info(f"Task created: id={task.id}, creator={actor.id}, assignee={task.assignee_id}")

        await self.broadcaster.publish(TaskCreated(task=_task_payload(task)))
        if assignee is not None:
            await self._announce_assignment(task, assignee, actor)
        await recalculate_progress(self.db, self.broadcaster, task.project_id)
        return task

    async def list_tasks(
        self,
        actor: User,
        project_id: Optional[UUID] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> TaskPage:
        """
        List the tasks visible to the actor, newest first.

        Orphaned assignees on the returned rows are repaired before the page
        is returned.
        """
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        conditions = []
        visibility = task_visibility(actor)
        if visibility is not None:
            conditions.append(visibility)
        if project_id is not None:
            conditions.append(Task.project_id == project_id)
        if status is not None:
            conditions.append(Task.status == status.value)
        if priority is not None:
            conditions.append(Task.priority == priority.value)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))

        total = await self.db.scalar(select(func.count(Task.id)).where(*conditions)) or 0
        result = await self.db.execute(
            select(Task)
            .where(*conditions)
            .order_by(Task.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        tasks = list(result.scalars().all())

        for task in tasks:
            await self.unassign_task_if_user_not_exists(task)

        return TaskPage(
            tasks=[TaskResponse.model_validate(task) for task in tasks],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    async def visible_tasks(self, actor: User, project_id: UUID) -> list[Task]:
        """All of a project's tasks the actor may see, unpaginated."""
        stmt = select(Task).where(Task.project_id == project_id)
        visibility = task_visibility(actor)
        if visibility is not None:
            stmt = stmt.where(visibility)
        result = await self.db.execute(stmt.order_by(Task.created_at))
        return list(result.scalars().all())

    async def get_task(self, actor: User, task_id: UUID) -> Task:
        stmt = select(Task).where(Task.id == task_id)
        visibility = task_visibility(actor)
        if visibility is not None:
            stmt = stmt.where(visibility)
        task = (await self.db.execute(stmt)).scalar_one_or_none()
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def edit_task(self, actor: User, task_id: UUID, changes: TaskUpdate) -> Task:
        require(actor.role, Action.EDIT, Resource.TASK, "Not authorized to edit tasks")
        task = await self._load(task_id)

        updates = changes.model_dump(exclude_unset=True)
        if "project_id" in updates:
            await self._ensure_project(updates["project_id"])

        new_assignee = None
        assignee_changed = "assignee_id" in updates and updates["assignee_id"] != task.assignee_id
        if assignee_changed and updates["assignee_id"] is not None:
            new_assignee = await self._get_assignee(updates["assignee_id"])

        deadline_changed = "deadline" in updates and updates["deadline"] != task.deadline
        old_project_id = task.project_id
        old_status = task.status

        for field, value in updates.items():
            if field in ("priority", "status") and value is not None:
                value = value.value
            setattr(task, field, value)

        if assignee_changed and "status" not in updates:
            if new_assignee is None:
                task.status = TaskStatus.PENDING.value
            elif task.status in (TaskStatus.PENDING.value, TaskStatus.DECLINED.value):
                task.status = TaskStatus.ASSIGNED.value
            task.accepted = False
            task.decline_reason = None

        await self.db.commit()
        task = await self._load(task_id)
        logger.info(f"Task edited: id={task_id}, by={actor.id}, fields={sorted(updates)}")

        if new_assignee is not None:
            await self._announce_assignment(task, new_assignee, actor)
        elif deadline_changed and task.assignee is not None and task.deadline is not None:
            await NotificationService.notify_task_rescheduled(
                self.db, self.broadcaster, task, task.assignee, task.deadline
            )

        await self._announce_update(task, changes.model_dump(mode="json", exclude_unset=True))

        if task.status != old_status or task.project_id != old_project_id:
            await recalculate_progress(self.db, self.broadcaster, task.project_id)
            if old_project_id != task.project_id:
                await recalculate_progress(self.db, self.broadcaster, old_project_id)
        return task

    async def delete_task(self, actor: User, task_id: UUID) -> None:
        require(actor.role, Action.DELETE, Resource.TASK, "Not authorized to delete tasks")
        task = await self._load(task_id)
        project_id = task.project_id

        await self.db.delete(task)
        await self.db.commit()
        logger.info(f"Task deleted: id={task_id}, by={actor.id}")

        await self.broadcaster.publish(TaskDeleted(task_id=task_id))
        await recalculate_progress(self.db, self.broadcaster, project_id)

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    async def assign_task(self, actor: User, task_id: UUID, assignee_id: UUID) -> Task:
        """
        Assign a task and notify the assignee.

        Every call produces one notification and one ``task-assigned`` event,
        including repeated assignments to the same user.
        """
        require(actor.role, Action.ASSIGN, Resource.TASK, "Not authorized to assign tasks")
        task = await self._load(task_id)
        assignee = await self._get_assignee(assignee_id)

        task.assignee_id = assignee.id
        task.status = TaskStatus.ASSIGNED.value
        task.accepted = False
        task.decline_reason = None
        await self.db.commit()

        task = await self._load(task_id)
        logger.info(f"Task assigned: id={task_id}, assignee={assignee_id}, by={actor.id}")

        await self._announce_assignment(task, assignee, actor)
        return task

    async def unassign_task(self, actor: User, task_id: UUID) -> Task:
        require(actor.role, Action.UNASSIGN, Resource.TASK, "Not authorized to unassign tasks")
        task = await self._load(task_id)

        task.assignee_id = None
        task.status = TaskStatus.PENDING.value
        task.accepted = False
        await self.db.commit()

        task = await self._load(task_id)
        await self._announce_update(task, {"assignee_id": None, "status": TaskStatus.PENDING.value})
        return task

    async def list_unassigned_tasks(self, actor: User) -> list[Task]:
        require(actor.role, Action.ASSIGN, Resource.TASK, "Not authorized to view unassigned tasks")
        result = await self.db.execute(
            select(Task)
            .where(Task.assignee_id.is_(None), Task.status == TaskStatus.PENDING.value)
            .order_by(Task.created_at.desc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Assignee actions
    # ------------------------------------------------------------------

    async def start_task(self, actor: User, task_id: UUID) -> Task:
        require(actor.role, Action.START, Resource.TASK, "Not authorized to start this task")
        task = await self._load(task_id)
        self._require_assignee(actor, task, "start")

        task.status = TaskStatus.IN_PROGRESS.value
        await self.db.commit()

        await self._announce_update(task, {"status": task.status})
        await recalculate_progress(self.db, self.broadcaster, task.project_id)
        return task

    async def accept_task(self, actor: User, task_id: UUID) -> Task:
        require(actor.role, Action.ACCEPT, Resource.TASK, "Not authorized to accept this task")
        task = await self._load(task_id)
        self._require_assignee(actor, task, "accept")

        task.status = TaskStatus.ACCEPTED.value
        task.accepted = True
        task.decline_reason = None
        await self.db.commit()
        logger.info(f"Task accepted: id={task_id}, by={actor.id}")

        if task.creator is not None:
            await NotificationService.notify_task_accepted(self.db, self.broadcaster, task, task.creator, actor)
        await self._announce_update(task, {"status": task.status, "accepted": True})
        return task

    async def decline_task(self, actor: User, task_id: UUID, reason: Optional[str]) -> Task:
        require(actor.role, Action.DECLINE, Resource.TASK, "Not authorized to decline this task")
        task = await self._load(task_id)
        self._require_assignee(actor, task, "decline")

        reason = (reason or "").strip()
        if not reason:
            raise ValidationFailedError("Decline reason is required")

        task.status = TaskStatus.DECLINED.value
        task.accepted = False
        task.decline_reason = reason
        task.assignee_id = None
        await self.db.commit()

        task = await self._load(task_id)
        logger.info(f"Task declined: id={task_id}, by={actor.id}")

        if task.creator is not None:
            await NotificationService.notify_task_declined(
                self.db, self.broadcaster, task, task.creator, actor, reason
            )
        await self._announce_update(
            task,
            {"status": task.status, "assignee_id": None, "decline_reason": reason},
        )
        return task

    async def update_task_status(self, actor: User, task_id: UUID, status: TaskStatus) -> Task:
        """Move a task; the assignee or anyone who manages tasks may do this."""
        require(actor.role, Action.UPDATE_STATUS, Resource.TASK, "Not authorized to update task status")
        task = await self._load(task_id)

        manages_tasks = actor.role in (Role.MANAGER.value, Role.TEAM_LEADER.value, Role.ADMIN.value)
        if task.assignee_id != actor.id and not manages_tasks:
            raise NotAuthorizedError("Not authorized to update this task")

        previous = task.status
        task.status = status.value
        if status == TaskStatus.DONE:
            task.progress = 100
        await self.db.commit()
        logger.info(f"Task status updated: id={task_id}, {previous} -> {task.status}")

        await self._announce_update(task, {"status": task.status})
        if status == TaskStatus.DONE and previous != TaskStatus.DONE.value:
            if task.creator is not None:
                await NotificationService.notify_task_completed(
                    self.db, self.broadcaster, task, task.creator, actor
                )
            await self.broadcaster.publish(TaskCompleted(task_id=task.id))

        await recalculate_progress(self.db, self.broadcaster, task.project_id)
        return task

    async def update_task_progress(self, actor: User, task_id: UUID, progress: int) -> Task:
        if progress < 0 or progress > 100:
            raise ValidationFailedError("Progress must be between 0 and 100")
        require(actor.role, Action.UPDATE_PROGRESS, Resource.TASK, "Only the team leader can update task progress")
        task = await self._load(task_id)

        if actor.role == Role.TEAM_LEADER.value and not await self._leads_task_team(actor, task):
            raise NotAuthorizedError("Only the team leader can update task progress")

        task.progress = progress
        await self.db.commit()

        await self._announce_update(task, {"progress": progress})
        return task

    # ------------------------------------------------------------------
    # Orphan repair and reminders
    # ------------------------------------------------------------------

    async def unassign_task_if_user_not_exists(self, task: Task) -> bool:
        """
        Clear an assignee that no longer exists.

        Returns True when the task was repaired. Tasks with no assignee or a
        valid assignee are left untouched, so repeated calls are no-ops.
        """
        if task.assignee_id is None:
            return False

        exists = await self.db.scalar(select(User.id).where(User.id == task.assignee_id))
        if exists is not None:
            return False

        logger.warning(f"Unassigning task {task.id}: assignee {task.assignee_id} no longer exists")
        task.assignee_id = None
        task.status = TaskStatus.PENDING.value
        task.accepted = False
        await self.db.commit()

        await self._announce_update(task, {"assignee_id": None, "status": TaskStatus.PENDING.value})
        return True

    async def cleanup_orphaned_tasks(self, actor: User) -> CleanupResult:
        require(actor.role, Action.CLEANUP, Resource.TASK, "Not authorized to clean up tasks")
        result = await self.db.execute(
            select(Task).where(
                Task.assignee_id.is_not(None),
                Task.assignee_id.not_in(select(User.id)),
            )
        )

        repaired = []
        for task in result.scalars().all():
            if await self.unassign_task_if_user_not_exists(task):
                repaired.append(task.id)

        logger.info(f"Orphaned task cleanup: repaired={len(repaired)}")
        return CleanupResult(
            unassigned_tasks=repaired,
            message=f"Cleaned up {len(repaired)} tasks with non-existent users",
        )

    async def notify_due_today(self, actor: User, now: Optional[datetime] = None) -> int:
        """Send a due-today reminder to the assignee of every open task due today."""
        require(actor.role, Action.REMIND, Resource.TASK, "Not authorized to send task reminders")
        start = (now or datetime.utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
        result = await self.db.execute(
            select(Task).where(
                Task.deadline >= start,
                Task.deadline < start + timedelta(days=1),
                Task.assignee_id.is_not(None),
                Task.status != TaskStatus.DONE.value,
            )
        )

        sent = 0
        for task in result.scalars().all():
            if task.assignee is None:
                continue
            await NotificationService.notify_task_due_today(self.db, self.broadcaster, task, task.assignee)
            sent += 1

        logger.info(f"Due-today reminders sent: {sent}")
        return sent


def get_task_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> TaskService:
    """FastAPI dependency for TaskService."""
    return TaskService(db, broadcaster)
