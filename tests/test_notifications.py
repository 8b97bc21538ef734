"""Tests for notification endpoints and the notification service."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pulseboard.models import Notification, User
from pulseboard.schemas.notification import NotificationType
from pulseboard.services.notification_service import NotificationService
from pulseboard.websocket.events import NewNotification


@pytest.fixture
def make_notification(db_session: AsyncSession):
    """Factory inserting a notification for a user."""
    async def _make_notification(user: User, **fields) -> Notification:
        notification = Notification(
            user_id=user.id,
            title=fields.pop("title", "Heads up"),
            message=fields.pop("message", "Something happened"),
            type=fields.pop("type", NotificationType.SYSTEM.value),
            **fields,
        )
        db_session.add(notification)
        await db_session.commit()
        return notification

    return _make_notification


@pytest.mark.asyncio
class TestListNotifications:
    """Tests for GET /api/notifications."""

    async def test_newest_first_and_only_own(
        self, client: AsyncClient, headers, employee: User, other_employee: User, make_notification,
    ):
        now = datetime.utcnow()
        await make_notification(employee, title="Old", created_at=now - timedelta(hours=1))
        await make_notification(employee, title="New", created_at=now)
        await make_notification(other_employee, title="Not mine")

        response = await client.get("/api/notifications", headers=headers(employee))

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["New", "Old"]

    async def test_unread_only(self, client: AsyncClient, headers, employee: User, make_notification):
        await make_notification(employee, title="Seen", is_read=True)
        await make_notification(employee, title="Fresh")

        response = await client.get("/api/notifications", params={"unread_only": True}, headers=headers(employee))

        assert [n["title"] for n in response.json()] == ["Fresh"]

    async def test_pagination(self, client: AsyncClient, headers, employee: User, make_notification):
        now = datetime.utcnow()
        for minutes in range(3):
            await make_notification(employee, title=f"N{minutes}", created_at=now - timedelta(minutes=minutes))

        response = await client.get("/api/notifications", params={"skip": 1, "limit": 1}, headers=headers(employee))

        assert [n["title"] for n in response.json()] == ["N1"]

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/notifications")

        assert response.status_code == 401


@pytest.mark.asyncio
class TestReadState:
    """Tests for counts and marking notifications read."""

    async def test_count(self, client: AsyncClient, headers, employee: User, make_notification):
        await make_notification(employee, is_read=True)
        await make_notification(employee)
        await make_notification(employee)

        response = await client.get("/api/notifications/count", headers=headers(employee))

        assert response.json() == {"total": 3, "unread": 2}

    async def test_mark_read(
        self, client: AsyncClient, headers, db_session: AsyncSession, employee: User, make_notification,
    ):
        notification = await make_notification(employee)

        response = await client.post(f"/api/notifications/{notification.id}/read", headers=headers(employee))

        assert response.status_code == 204
        await db_session.refresh(notification)
        assert notification.is_read is True

    async def test_mark_read_of_other_user(
        self, client: AsyncClient, headers, db_session: AsyncSession,
        employee: User, other_employee: User, make_notification,
    ):
        notification = await make_notification(employee)

        response = await client.post(f"/api/notifications/{notification.id}/read", headers=headers(other_employee))

        assert response.status_code == 404
        assert response.json()["error"] == "Notification not found"
        await db_session.refresh(notification)
        assert notification.is_read is False

    async def test_mark_unknown_read(self, client: AsyncClient, headers, employee: User):
        response = await client.post(f"/api/notifications/{uuid4()}/read", headers=headers(employee))

        assert response.status_code == 404

    async def test_mark_all_read(
        self, client: AsyncClient, headers, employee: User, other_employee: User, make_notification,
    ):
        await make_notification(employee)
        await make_notification(employee)
        await make_notification(employee, is_read=True)
        await make_notification(other_employee)

        response = await client.post("/api/notifications/read-all", headers=headers(employee))
        count = await client.get("/api/notifications/count", headers=headers(employee))
        others = await client.get("/api/notifications/count", headers=headers(other_employee))

        assert response.json()["data"] == 2
        assert response.json()["message"] == "All notifications marked as read"
        assert count.json() == {"total": 3, "unread": 0}
        assert others.json()["unread"] == 1


@pytest.mark.asyncio
class TestNotificationService:
    """Tests for storing and pushing notifications."""

    async def test_create_pushes_to_private_channel(self, db_session: AsyncSession, broadcaster, employee: User):
        notification = await NotificationService.create_notification(
            db_session,
            broadcaster,
            recipient=employee,
            title="Hello",
            message="World",
            notification_type=NotificationType.SYSTEM,
            link="/settings",
        )

        assert notification.id is not None
        assert broadcaster.channels(NewNotification) == [f"notifications-{employee.clerk_id}"]
        pushed = broadcaster.events(NewNotification)[0].notification
        assert pushed["id"] == str(notification.id)
        assert pushed["type"] == "SYSTEM"
        assert pushed["is_read"] is False
