"""Shared pytest fixtures for backend tests."""

import os
from typing import AsyncGenerator, Optional
from uuid import uuid4

# Settings are read at import time; provide them before importing the app
os.environ.setdefault("DB_SERVER", "localhost")
os.environ.setdefault("DB_NAME", "pulseboard_test")
os.environ.setdefault("DB_USER", "pulseboard")
os.environ.setdefault("DB_PASSWORD", "pulseboard")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests")
os.environ.setdefault("CLERK_WEBHOOK_SECRET", "whsec_cHVsc2Vib2FyZC10ZXN0LXdlYmhvb2stc2VjcmV0ISE=")
os.environ.setdefault("CLERK_SECRET_KEY", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pulseboard.database import Base, get_db
from pulseboard.main import app
from pulseboard.models import Project, Task, Team, User
from pulseboard.services.auth_service import create_access_token
from pulseboard.websocket.handlers import Broadcaster, BroadcastResult, get_broadcaster

# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingBroadcaster(Broadcaster):
    """Broadcaster that keeps every published event instead of sending it."""

    def __init__(self) -> None:
        super().__init__()
        self.published: list[tuple[object, str]] = []

    async def publish(self, event, channel: Optional[str] = None) -> BroadcastResult:
        target = channel or event.channel.value
        self.published.append((event, target))
        return BroadcastResult(channel=target, recipients=0, message_type=event.event, success=True)

    def events(self, event_type: type) -> list:
        return [event for event, _ in self.published if isinstance(event, event_type)]

    def channels(self, event_type: type) -> list[str]:
        return [channel for event, channel in self.published if isinstance(event, event_type)]


@pytest.fixture(scope="function")
async def engine(request):
    """
    Create a test database engine with SQLite.

    Foreign keys are enforced so ondelete rules behave as on PostgreSQL.
    Tests marked ``without_foreign_keys`` can insert rows with dangling
    references, as left behind by data written before the constraints.
    """
    engine = create_async_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enforce = request.node.get_closest_marker("without_foreign_keys") is None

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA foreign_keys={'ON' if enforce else 'OFF'}")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_maker() as session:
        yield session


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, broadcaster: RecordingBroadcaster) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and broadcaster overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating a user with the given role."""
    async def _make_user(role: str = "EMPLOYEE", **fields) -> User:
        suffix = uuid4().hex[:8]
        user = User(
            clerk_id=fields.pop("clerk_id", f"user_{suffix}"),
            email=fields.pop("email", f"{role.lower()}-{suffix}@example.com"),
            name=fields.pop("name", f"{role.title()} {suffix}"),
            role=role,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
async def manager(make_user) -> User:
    return await make_user("MANAGER", name="Maria Manager")


@pytest.fixture
async def team_leader(make_user) -> User:
    return await make_user("TEAM_LEADER", name="Tom Leader")


@pytest.fixture
async def employee(make_user) -> User:
    return await make_user("EMPLOYEE", name="Eve Employee")


@pytest.fixture
async def other_employee(make_user) -> User:
    return await make_user("EMPLOYEE", name="Oscar Other")


@pytest.fixture
async def client_user(make_user) -> User:
    return await make_user("CLIENT", name="Carl Client")


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user("ADMIN", name="Ada Admin")


def auth_headers_for(user: User) -> dict:
    """Authorization headers carrying a token for ``user``."""
    token = create_access_token(data={"sub": user.clerk_id, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers_for


@pytest.fixture
async def project(db_session: AsyncSession, manager: User, team_leader: User, employee: User, client_user: User) -> Project:
    """A project run by ``manager`` whose team is led by ``team_leader``."""
    team = Team(
        name="Apollo Team",
        leader_id=team_leader.id,
        members=[team_leader, employee],
    )
    project = Project(
        name="Apollo",
        description="Website relaunch",
        manager_id=manager.id,
        client_id=client_user.id,
        team=team,
    )
    db_session.add(project)
    await db_session.commit()
    return project


@pytest.fixture
def make_task(db_session: AsyncSession):
    """Factory inserting a task directly."""
    async def _make_task(project: Optional[Project] = None, **fields) -> Task:
        task = Task(
            title=fields.pop("title", "Write copy"),
            project_id=project.id if project is not None else None,
            **fields,
        )
        db_session.add(task)
        await db_session.commit()
        return task

    return _make_task
