"""Async engine, session factory and the request-scoped session dependency."""

import asyncio
import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=settings.sql_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
    pool_pre_ping=True,
    pool_recycle=3600,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for ORM models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Services commit their own writes; anything left pending when the handler
    returns is committed, and an exception rolls the session back.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def warmup_connection_pool(connections: int) -> int:
    """
    Open ``connections`` pooled connections before the first request.

    Capped at the pool size so warmup never spills into overflow. Returns
    the number of connections that answered ``SELECT 1``.
    """
    target = min(connections, settings.db_pool_size)
    logger.info(f"Warming up {target} database connections")

    async def ping() -> bool:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Connection warmup failed: {e}")
            return False

    results = await asyncio.gather(*(ping() for _ in range(target)))
    ready = sum(results)
    logger.info(f"Database pool ready: {ready}/{target} connections")
    return ready
