"""User profile, directory and role management."""

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotFoundError, ValidationFailedError
from ..models.user import User
from ..schemas.user import ASSIGNABLE_ROLES, Role, UserProfileUpdate
from ..websocket.events import MemberRoleUpdated
from ..websocket.handlers import Broadcaster, get_broadcaster
from . import clerk_client
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)


async def sync_user(
    db: AsyncSession,
    clerk_id: str,
    email: str,
    name: Optional[str] = None,
    profile_image: Optional[str] = None,
) -> tuple[User, bool]:
    """
    Insert or refresh a user from identity provider data.

    New users start as CLIENT. An existing user keeps their role.

    Returns:
        (user, created)
    """
    result = await db.execute(
        select(User).where(or_(User.clerk_id == clerk_id, User.email == email))
    )
    user = result.scalars().first()
    created = user is None

    if created:
        user = User(
            clerk_id=clerk_id,
            email=email,
            name=name,
            profile_image=profile_image,
            role=Role.CLIENT.value,
        )
        db.add(user)
    else:
        user.clerk_id = clerk_id
        user.email = email
        if name is not None:
            user.name = name
        if profile_image is not None:
            user.profile_image = profile_image

    await db.commit()
    logger.info(f"User synced: clerk_id={clerk_id}, created={created}, role={user.role}")
    return user, created


class UserService:
    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    async def update_profile(self, actor: User, changes: UserProfileUpdate) -> User:
        updates = changes.model_dump(exclude_unset=True)
        if "skills" in updates and updates["skills"] is not None:
            updates["skills"] = list(dict.fromkeys(s.strip() for s in updates["skills"] if s.strip()))
        for field, value in updates.items():
            if value is not None:
                setattr(actor, field, value)

        await self.db.commit()
        logger.info(f"Profile updated: user={actor.id}, fields={sorted(updates)}")
        return actor

    async def list_users(self, actor: User, role: Optional[Role] = None) -> list[User]:
        require(actor.role, Action.VIEW, Resource.USER, "Not authorized to view users")
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        result = await self.db.execute(stmt.order_by(User.name, User.email))
        return list(result.scalars().all())

    async def update_user_role(
        self,
        actor: User,
        user_id: UUID,
        role: Role,
        transport: Optional[Any] = None,
    ) -> User:
        """
        Change another user's role and mirror it to the identity provider.

        ADMIN can not be handed out from here.
        """
        require(actor.role, Action.MANAGE_ROLES, Resource.USER, "Not authorized to manage roles")
        if role not in ASSIGNABLE_ROLES:
            raise ValidationFailedError(f"Role {role.value} can not be assigned")

        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        previous = user.role
        user.role = role.value
        await self.db.commit()
        logger.info(f"Role updated: user={user.id}, {previous} -> {role.value}, by={actor.id}")

        await clerk_client.push_role_metadata(user.clerk_id, role.value, transport=transport)
        await self.broadcaster.publish(
            MemberRoleUpdated(member_id=user.id, role=role.value, member_name=user.name or user.email)
        )
        return user


def get_user_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> UserService:
    return UserService(db, broadcaster)
