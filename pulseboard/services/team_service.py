"""Team management."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotAuthorizedError, NotFoundError
from ..models.team import Team, TeamMembers
from ..models.user import User
from ..schemas.team import TeamCreate, TeamUpdate
from ..schemas.user import Role
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, team_id: UUID) -> Optional[Team]:
        result = await self.db.execute(
            select(Team)
            .where(Team.id == team_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _users(self, user_ids: list[UUID]) -> list[User]:
        """Load users by id, failing if any of them is missing."""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return []
        result = await self.db.execute(select(User).where(User.id.in_(unique_ids)))
        users = {user.id: user for user in result.scalars().all()}
        missing = [str(user_id) for user_id in unique_ids if user_id not in users]
        if missing:
            raise NotFoundError(f"Users not found: {', '.join(missing)}")
        return [users[user_id] for user_id in unique_ids]

    async def create_team(self, actor: User, data: TeamCreate) -> Team:
        require(actor.role, Action.CREATE, Resource.TEAM, "Not authorized to create teams")

        leader = await self.db.get(User, data.leader_id)
        if leader is None:
            raise NotFoundError("Team leader not found")
        members = await self._users(data.member_ids)

        team = Team(
            name=data.name,
            description=data.description,
            leader_id=leader.id,
            members=members,
        )
        self.db.add(team)
        await self.db.commit()

        logger.info(f"Team created: id={team.id}, leader={leader.id}, members={len(members)}")
        return await self._load(team.id)

    async def update_team(self, actor: User, team_id: UUID, changes: TeamUpdate) -> Team:
        """Edit a team; ``member_ids`` replaces the whole member set."""
        require(actor.role, Action.EDIT, Resource.TEAM, "Not authorized to edit teams")
        team = await self._load(team_id)
        if team is None:
            raise NotFoundError("Team not found")

        if actor.role == Role.TEAM_LEADER.value and team.leader_id != actor.id:
            raise NotAuthorizedError("Only the team leader can edit this team")

        updates = changes.model_dump(exclude_unset=True)
        if updates.get("leader_id") is not None:
            if await self.db.get(User, updates["leader_id"]) is None:
                raise NotFoundError("Team leader not found")
            team.leader_id = updates["leader_id"]
        if "name" in updates and updates["name"] is not None:
            team.name = updates["name"]
        if "description" in updates:
            team.description = updates["description"]
        if updates.get("member_ids") is not None:
            team.members = await self._users(updates["member_ids"])

        await self.db.commit()
        logger.info(f"Team updated: id={team_id}, by={actor.id}")
        return await self._load(team_id)

    async def list_teams(self, actor: User) -> list[Team]:
        require(actor.role, Action.VIEW, Resource.TEAM, "Not authorized to view teams")
        stmt = select(Team)
        if actor.role not in (Role.MANAGER.value, Role.ADMIN.value):
            stmt = stmt.where(
                or_(
                    Team.leader_id == actor.id,
                    Team.id.in_(select(TeamMembers.c.team_id).where(TeamMembers.c.user_id == actor.id)),
                )
            )
        result = await self.db.execute(stmt.order_by(Team.created_at.desc()))
        return list(result.scalars().all())

    async def get_team(self, actor: User, team_id: UUID) -> Team:
        team = await self._load(team_id)
        if team is None:
            raise NotFoundError("Team not found")
        if actor.role not in (Role.MANAGER.value, Role.ADMIN.value):
            is_member = any(member.id == actor.id for member in team.members)
            if team.leader_id != actor.id and not is_member:
                raise NotFoundError("Team not found")
        return team


def get_team_service(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(db)
