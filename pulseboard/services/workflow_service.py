"""Automation workflows and their per-provider message templates."""

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotFoundError
from ..models.user import User
from ..models.workflow import Workflow
from ..schemas.connection import Provider
from ..schemas.workflow import WorkflowCreate
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)

TEMPLATE_FIELDS = {
    Provider.DISCORD: "discord_template",
    Provider.NOTION: "notion_template",
    Provider.SLACK: "slack_template",
}


class WorkflowService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _owned(self, actor: User, workflow_id: UUID) -> Workflow:
        result = await self.db.execute(
            select(Workflow).where(Workflow.id == workflow_id, Workflow.user_id == actor.id)
        )
        workflow = result.scalar_one_or_none()
        if workflow is None:
            raise NotFoundError("Workflow not found")
        return workflow

    async def list_workflows(self, actor: User) -> list[Workflow]:
        require(actor.role, Action.VIEW, Resource.WORKFLOW, "Not authorized to view workflows")
        result = await self.db.execute(
            select(Workflow).where(Workflow.user_id == actor.id).order_by(Workflow.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_workflow(self, actor: User, data: WorkflowCreate) -> Workflow:
        require(actor.role, Action.CREATE, Resource.WORKFLOW, "Not authorized to create workflows")
        workflow = Workflow(user_id=actor.id, name=data.name, description=data.description, publish=False)
        self.db.add(workflow)
        await self.db.commit()

        logger.info(f"Workflow created: id={workflow.id}, user={actor.id}")
        return workflow

    async def set_publish(self, actor: User, workflow_id: UUID, publish: bool) -> tuple[Workflow, str]:
        """Toggle a workflow live; returns it with the outcome message."""
        require(actor.role, Action.EDIT, Resource.WORKFLOW, "Not authorized to edit workflows")
        workflow = await self._owned(actor, workflow_id)
        workflow.publish = publish
        await self.db.commit()
        return workflow, "Workflow published" if publish else "Workflow unpublished"

    async def save_template(self, actor: User, workflow_id: UUID, provider: Provider, template: str) -> Workflow:
        require(actor.role, Action.EDIT, Resource.WORKFLOW, "Not authorized to edit workflows")
        workflow = await self._owned(actor, workflow_id)
        setattr(workflow, TEMPLATE_FIELDS[provider], template)
        await self.db.commit()

        logger.info(f"Workflow template saved: id={workflow_id}, provider={provider.value}")
        return workflow


def get_workflow_service(db: AsyncSession = Depends(get_db)) -> WorkflowService:
    return WorkflowService(db)
