"""Project comments."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotFoundError
from ..models.comment import Comment
from ..models.project import Project
from ..models.user import User
from ..schemas.comment import CommentCreate
from ..websocket.handlers import Broadcaster, get_broadcaster
from .notification_service import NotificationService
from .policy import Action, Resource, require
from .scoping import project_visibility

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    async def _visible_project(self, actor: User, project_id: UUID) -> Project:
        stmt = select(Project).where(Project.id == project_id)
        visibility = project_visibility(actor)
        if visibility is not None:
            stmt = stmt.where(visibility)
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def create_comment(self, actor: User, data: CommentCreate) -> Comment:
        """Post a comment on a visible project and notify its manager."""
        require(actor.role, Action.CREATE, Resource.COMMENT, "Not authorized to comment")
        project = await self._visible_project(actor, data.project_id)

        comment = Comment(
            content=data.content,
            rating=data.rating,
            author_id=actor.id,
            project_id=project.id,
        )
        self.db.add(comment)
        await self.db.commit()

        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment.id)
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one()
        logger.info(f"Comment created: id={comment.id}, project={project.id}, author={actor.id}")

        if project.manager is not None:
            await NotificationService.notify_comment_added(
                self.db, self.broadcaster, project, project.manager, actor
            )
        return comment

    async def list_comments(self, actor: User, project_id: Optional[UUID] = None) -> list[Comment]:
        """Comments on one project, or on every project the actor can see."""
        stmt = select(Comment)
        if project_id is not None:
            await self._visible_project(actor, project_id)
            stmt = stmt.where(Comment.project_id == project_id)
        else:
            visibility = project_visibility(actor)
            if visibility is not None:
                stmt = stmt.where(Comment.project_id.in_(select(Project.id).where(visibility)))
        result = await self.db.execute(stmt.order_by(Comment.created_at.desc()))
        return list(result.scalars().all())


def get_comment_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> CommentService:
    return CommentService(db, broadcaster)
