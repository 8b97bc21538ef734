"""Time tracking against tasks.

A user has at most one open entry at a time. The check before insert gives
a friendly error in the common case; the partial unique index on open
entries settles concurrent starts, and the loser gets the same error.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import ConflictError, NotFoundError
from ..models.task import Task
from ..models.time_entry import TimeEntry
from ..models.user import User
from ..schemas.time_entry import TaskTimeTotal, TimeReport
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)

ACTIVE_ENTRY_MESSAGE = "You already have an active time entry"


class TimeTrackingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _open_entry(self, user: User) -> Optional[TimeEntry]:
        result = await self.db.execute(
            select(TimeEntry).where(TimeEntry.user_id == user.id, TimeEntry.end_time.is_(None))
        )
        return result.scalar_one_or_none()

    async def start_time_tracking(
        self,
        actor: User,
        task_id: UUID,
        description: Optional[str] = None,
    ) -> TimeEntry:
        require(actor.role, Action.TRACK, Resource.TIME_ENTRY, "Not authorized to track time")

        if await self.db.get(Task, task_id) is None:
            raise NotFoundError("Task not found")
        if await self._open_entry(actor) is not None:
            raise ConflictError(ACTIVE_ENTRY_MESSAGE)

        user_id = actor.id
        entry = TimeEntry(
            user_id=user_id,
            task_id=task_id,
            start_time=datetime.utcnow(),
            description=description,
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Concurrent time entry start rejected: user={user_id}, task={task_id}")
            raise ConflictError(ACTIVE_ENTRY_MESSAGE)

        logger.info(f"Time tracking started: entry={entry.id}, user={user_id}, task={task_id}")
        return entry

    async def stop_time_tracking(self, actor: User, entry_id: UUID) -> TimeEntry:
        result = await self.db.execute(
            select(TimeEntry).where(
                TimeEntry.id == entry_id,
                TimeEntry.user_id == actor.id,
                TimeEntry.end_time.is_(None),
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("Active time entry not found")

        entry.end_time = datetime.utcnow()
        await self.db.commit()

        logger.info(f"Time tracking stopped: entry={entry.id}, seconds={entry.duration_seconds}")
        return entry

    async def get_active_time_entry(self, actor: User, task_id: UUID) -> Optional[TimeEntry]:
        result = await self.db.execute(
            select(TimeEntry).where(
                TimeEntry.user_id == actor.id,
                TimeEntry.task_id == task_id,
                TimeEntry.end_time.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_task_time_entries(self, actor: User, task_id: UUID) -> list[TimeEntry]:
        """The caller's entries on a task, most recent first."""
        result = await self.db.execute(
            select(TimeEntry)
            .where(TimeEntry.user_id == actor.id, TimeEntry.task_id == task_id)
            .order_by(TimeEntry.start_time.desc())
        )
        return list(result.scalars().all())

    async def time_report(self, actor: User) -> TimeReport:
        """Closed-entry seconds per task for the caller."""
        require(actor.role, Action.VIEW, Resource.TIME_ENTRY, "Not authorized to view time reports")
        result = await self.db.execute(
            select(TimeEntry, Task.title)
            .join(Task, Task.id == TimeEntry.task_id)
            .where(TimeEntry.user_id == actor.id, TimeEntry.end_time.is_not(None))
            .order_by(func.lower(Task.title))
        )

        totals: dict[UUID, TaskTimeTotal] = {}
        for entry, title in result.all():
            bucket = totals.setdefault(
                entry.task_id,
                TaskTimeTotal(task_id=entry.task_id, title=title, total_seconds=0),
            )
            bucket.total_seconds += entry.duration_seconds or 0

        tasks = list(totals.values())
        return TimeReport(tasks=tasks, total_seconds=sum(t.total_seconds for t in tasks))


def get_time_tracking_service(db: AsyncSession = Depends(get_db)) -> TimeTrackingService:
    return TimeTrackingService(db)
