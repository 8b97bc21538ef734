"""Saved third-party connections."""

import logging

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.connection import Connection
from ..models.user import User
from ..schemas.connection import ConnectionCreate
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)


class ConnectionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_connections(self, actor: User) -> list[Connection]:
        require(actor.role, Action.VIEW, Resource.CONNECTION, "Not authorized to view connections")
        result = await self.db.execute(
            select(Connection).where(Connection.user_id == actor.id).order_by(Connection.created_at.desc())
        )
        return list(result.scalars().all())

    async def save_connection(self, actor: User, data: ConnectionCreate) -> Connection:
        """Insert a connection, or refresh the one with the same provider and external id."""
        require(actor.role, Action.CREATE, Resource.CONNECTION, "Not authorized to add connections")
        result = await self.db.execute(
            select(Connection).where(
                Connection.user_id == actor.id,
                Connection.provider == data.provider.value,
                Connection.external_id == data.external_id,
            )
        )
        connection = result.scalar_one_or_none()
        if connection is None:
            connection = Connection(
                user_id=actor.id,
                provider=data.provider.value,
                external_id=data.external_id,
            )
            self.db.add(connection)

        connection.name = data.name
        connection.access_token = data.access_token
        connection.webhook_url = data.webhook_url
        connection.details = dict(data.details)
        await self.db.commit()

        logger.info(f"Connection saved: id={connection.id}, provider={data.provider.value}, user={actor.id}")
        return connection


def get_connection_service(db: AsyncSession = Depends(get_db)) -> ConnectionService:
    return ConnectionService(db)
