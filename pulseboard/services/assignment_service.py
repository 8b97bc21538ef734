"""Skill-based team assignment for a task."""

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotFoundError
from ..models.task import Task
from ..models.team import Team
from ..models.user import User
from ..schemas.task import SkillAssignResult
from ..schemas.user import Role
from ..websocket.events import TaskUpdated
from ..websocket.handlers import Broadcaster, get_broadcaster
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)


def _normalize(skills) -> set[str]:
    return {skill.strip().lower() for skill in (skills or []) if skill and skill.strip()}


def rank_candidates(users: list[User], required_skills: list[str]) -> list[User]:
    """
    Users sharing at least one required skill, least loaded first.

    Ties on task load go to the more experienced user, then to the
    longest-standing account.
    """
    wanted = _normalize(required_skills)
    eligible = [
        user
        for user in users
        if user.role != Role.CLIENT.value and _normalize(user.skills) & wanted
    ]
    return sorted(eligible, key=lambda u: (u.task_load or 0, -(u.experience or 0), u.created_at))


class AssignmentService:
    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    async def assign_by_skills(self, actor: User, task_id: UUID, required_skills: list[str]) -> SkillAssignResult:
        """
        Form a team for a task out of every user with a matching skill.

        The best ranked user leads the new team, the task is attached to it
        and each member's task load goes up by one.
        """
        require(actor.role, Action.ASSIGN, Resource.TASK, "Not authorized to assign tasks")

        task = await self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")

        users = (await self.db.execute(select(User))).scalars().all()
        candidates = rank_candidates(list(users), required_skills)
        if not candidates:
            raise NotFoundError("No users found with the required skills")

        leader = candidates[0]
        team = Team(
            name=f"Task {task.id} Team",
            description=f"Skill-based team for task {task.title}",
            leader_id=leader.id,
            members=list(candidates),
        )
        self.db.add(team)
        await self.db.flush()

        task.team_id = team.id
        task.required_skills = list(required_skills)
        for member in candidates:
            member.task_load = (member.task_load or 0) + 1
        await self.db.commit()

        logger.info(
            f"Skill assignment: task={task.id}, team={team.id}, "
            f"leader={leader.id}, members={len(candidates)}"
        )

        await self.broadcaster.publish(
            TaskUpdated(task_id=task.id, updates={"team_id": str(team.id), "required_skills": list(required_skills)})
        )
        return SkillAssignResult(
            task_id=task.id,
            team_id=team.id,
            leader_id=leader.id,
            member_ids=[member.id for member in candidates],
        )


def get_assignment_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> AssignmentService:
    return AssignmentService(db, broadcaster)
