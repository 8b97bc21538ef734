"""Tests for project comments and meetings."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pulseboard.models import Notification, User


async def notifications_for(db: AsyncSession, user: User) -> list[Notification]:
    result = await db.execute(select(Notification).where(Notification.user_id == user.id))
    return list(result.scalars().all())


MEETING = {
    "title": "Sprint review",
    "start_time": "2026-11-02T10:00:00",
    "end_time": "2026-11-02T11:00:00",
    "link": "https://meet.example.com/apollo",
}


@pytest.mark.asyncio
class TestComments:
    """Tests for /api/comments."""

    async def test_client_comment_notifies_manager(
        self, client: AsyncClient, headers, db_session: AsyncSession, manager: User, client_user: User, project,
    ):
        response = await client.post(
            "/api/comments",
            json={"content": "Love the new header", "project_id": str(project.id), "rating": 5},
            headers=headers(client_user),
        )

        assert response.status_code == 201
        comment = response.json()["data"]
        assert comment["rating"] == 5
        assert comment["author"]["id"] == str(client_user.id)

        notifications = await notifications_for(db_session, manager)
        assert len(notifications) == 1
        assert notifications[0].type == "COMMENT"
        assert notifications[0].message == 'Carl Client commented on project "Apollo"'

    async def test_comment_on_invisible_project(
        self, client: AsyncClient, headers, other_employee: User, project,
    ):
        response = await client.post(
            "/api/comments",
            json={"content": "Hello?", "project_id": str(project.id)},
            headers=headers(other_employee),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"

    async def test_rating_out_of_range(self, client: AsyncClient, headers, client_user: User, project):
        response = await client.post(
            "/api/comments",
            json={"content": "Meh", "project_id": str(project.id), "rating": 9},
            headers=headers(client_user),
        )

        assert response.status_code == 400

    async def test_list_by_project(
        self, client: AsyncClient, headers, employee: User, client_user: User, project,
    ):
        await client.post(
            "/api/comments",
            json={"content": "First", "project_id": str(project.id)},
            headers=headers(client_user),
        )

        visible = await client.get("/api/comments", params={"project_id": str(project.id)}, headers=headers(employee))
        everything = await client.get("/api/comments", headers=headers(employee))

        assert [c["content"] for c in visible.json()] == ["First"]
        assert [c["content"] for c in everything.json()] == ["First"]

    async def test_outsider_lists_nothing(
        self, client: AsyncClient, headers, other_employee: User, client_user: User, project,
    ):
        await client.post(
            "/api/comments",
            json={"content": "Private", "project_id": str(project.id)},
            headers=headers(client_user),
        )

        response = await client.get("/api/comments", headers=headers(other_employee))

        assert response.json() == []


@pytest.mark.asyncio
class TestMeetings:
    """Tests for /api/meetings."""

    async def test_create_invites_project_participants(
        self, client: AsyncClient, headers, db_session: AsyncSession,
        manager: User, team_leader: User, employee: User, client_user: User, project,
    ):
        response = await client.post(
            "/api/meetings",
            json={**MEETING, "project_id": str(project.id)},
            headers=headers(manager),
        )

        assert response.status_code == 201
        meeting = response.json()["data"]
        assert meeting["status"] == "SCHEDULED"
        assert meeting["organizer_id"] == str(manager.id)
        invited = {attendee["user_id"]: attendee["status"] for attendee in meeting["attendees"]}
        assert invited == {
            str(client_user.id): "PENDING",
            str(team_leader.id): "PENDING",
            str(employee.id): "PENDING",
        }

        for user in (client_user, team_leader, employee):
            notifications = await notifications_for(db_session, user)
            assert [n.type for n in notifications] == ["MEETING"]
        assert await notifications_for(db_session, manager) == []

    async def test_end_before_start_rejected(self, client: AsyncClient, headers, manager: User, project):
        response = await client.post(
            "/api/meetings",
            json={**MEETING, "end_time": "2026-11-02T09:00:00", "project_id": str(project.id)},
            headers=headers(manager),
        )

        assert response.status_code == 400

    async def test_unknown_project(self, client: AsyncClient, headers, manager: User):
        response = await client.post(
            "/api/meetings",
            json={**MEETING, "project_id": str(uuid4())},
            headers=headers(manager),
        )

        assert response.status_code == 404

    async def test_respond_notifies_organizer(
        self, client: AsyncClient, headers, db_session: AsyncSession, manager: User, employee: User, project,
    ):
        created = await client.post(
            "/api/meetings",
            json={**MEETING, "project_id": str(project.id)},
            headers=headers(manager),
        )
        meeting_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/meetings/{meeting_id}/response",
            json={"status": "ACCEPTED"},
            headers=headers(employee),
        )

        assert response.status_code == 200
        answers = {a["user_id"]: a["status"] for a in response.json()["data"]["attendees"]}
        assert answers[str(employee.id)] == "ACCEPTED"

        notifications = await notifications_for(db_session, manager)
        assert [n.type for n in notifications] == ["MEETING_RESPONSE"]
        assert notifications[0].message == "Eve Employee has accepted the meeting invitation"

    async def test_uninvited_user_can_not_respond(
        self, client: AsyncClient, headers, manager: User, other_employee: User, project,
    ):
        created = await client.post(
            "/api/meetings",
            json={**MEETING, "project_id": str(project.id)},
            headers=headers(manager),
        )

        response = await client.put(
            f"/api/meetings/{created.json()['data']['id']}/response",
            json={"status": "DECLINED"},
            headers=headers(other_employee),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "You are not invited to this meeting"

    async def test_only_organizer_changes_status(
        self, client: AsyncClient, headers, manager: User, employee: User, project,
    ):
        created = await client.post(
            "/api/meetings",
            json={**MEETING, "project_id": str(project.id)},
            headers=headers(manager),
        )
        meeting_id = created.json()["data"]["id"]

        denied = await client.put(
            f"/api/meetings/{meeting_id}/status", json={"status": "CANCELLED"}, headers=headers(employee),
        )
        cancelled = await client.put(
            f"/api/meetings/{meeting_id}/status", json={"status": "CANCELLED"}, headers=headers(manager),
        )

        assert denied.status_code == 403
        assert denied.json()["error"] == "Only the organizer can change the meeting status"
        assert cancelled.json()["data"]["status"] == "CANCELLED"

    async def test_list_my_meetings(
        self, client: AsyncClient, headers, manager: User, employee: User, other_employee: User, project,
    ):
        await client.post("/api/meetings", json={**MEETING, "project_id": str(project.id)}, headers=headers(manager))

        organizer = await client.get("/api/meetings", headers=headers(manager))
        invitee = await client.get("/api/meetings", headers=headers(employee))
        outsider = await client.get("/api/meetings", headers=headers(other_employee))

        assert len(organizer.json()) == 1
        assert len(invitee.json()) == 1
        assert outsider.json() == []
