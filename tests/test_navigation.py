"""Tests for navigation, dashboard redirect and the kanban board."""

import pytest
from httpx import AsyncClient

from pulseboard.client.kanban_board import KanbanBoard
from pulseboard.models import User


@pytest.mark.asyncio
class TestNavigationEndpoints:
    """Tests for /api/navigation and /dashboard."""

    async def test_client_navigation(self, client: AsyncClient, headers, client_user: User):
        response = await client.get("/api/navigation", headers=headers(client_user))

        assert response.status_code == 200
        assert [item["path"] for item in response.json()] == ["/dashboards/client", "/settings"]

    async def test_manager_navigation_includes_manage_roles(self, client: AsyncClient, headers, manager: User):
        response = await client.get("/api/navigation", headers=headers(manager))

        assert "Manage Roles" in [item["label"] for item in response.json()]

    async def test_dashboard_redirect(self, client: AsyncClient, headers, team_leader: User):
        response = await client.get("/dashboard", headers=headers(team_leader))

        assert response.status_code == 307
        assert response.headers["location"] == "/dashboards/team-leader"

    async def test_navigation_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/navigation")

        assert response.status_code == 401


@pytest.mark.asyncio
class TestKanban:
    """Tests for /api/kanban/{project_id}."""

    async def test_columns(self, client: AsyncClient, headers, manager: User, employee: User, project, make_task):
        pending = await make_task(project, title="Todo")
        assigned = await make_task(project, title="Queued", assignee_id=employee.id, status="ASSIGNED")
        started = await make_task(project, title="Doing", assignee_id=employee.id, status="IN_PROGRESS")
        done = await make_task(project, title="Done", assignee_id=employee.id, status="DONE")

        response = await client.get(f"/api/kanban/{project.id}", headers=headers(manager))

        body = response.json()
        assert body["project_id"] == str(project.id)
        assert list(body["columns"]) == ["PENDING", "IN_PROGRESS", "DONE"]
        assert {t["id"] for t in body["columns"]["PENDING"]} == {str(pending.id), str(assigned.id)}
        assert [t["id"] for t in body["columns"]["IN_PROGRESS"]] == [str(started.id)]
        assert [t["id"] for t in body["columns"]["DONE"]] == [str(done.id)]

    async def test_employee_sees_only_own_cards(
        self, client: AsyncClient, headers, employee: User, other_employee: User, project, make_task,
    ):
        mine = await make_task(project, title="Mine", assignee_id=employee.id, status="IN_PROGRESS")
        await make_task(project, title="Theirs", assignee_id=other_employee.id, status="IN_PROGRESS")

        response = await client.get(f"/api/kanban/{project.id}", headers=headers(employee))

        assert [t["id"] for t in response.json()["columns"]["IN_PROGRESS"]] == [str(mine.id)]

    async def test_moves_are_not_persisted(
        self, client: AsyncClient, headers, manager: User, project, make_task,
    ):
        task = await make_task(project, title="Todo")
        first = await client.get(f"/api/kanban/{project.id}", headers=headers(manager))
        board = KanbanBoard.from_response(first.json())

        toast = board.move_task(str(task.id), "DONE")
        assert toast == "Task moved successfully"
        assert board.column_of(str(task.id)) == "DONE"

        refetched = KanbanBoard.from_response(
            (await client.get(f"/api/kanban/{project.id}", headers=headers(manager))).json()
        )
        assert refetched.column_of(str(task.id)) == "PENDING"


class TestKanbanBoard:
    """Tests for the local board model."""

    def test_groups_by_status(self):
        board = KanbanBoard([
            {"id": "1", "status": "PENDING"},
            {"id": "2", "status": "ASSIGNED"},
            {"id": "3", "status": "IN_PROGRESS"},
            {"id": "4", "status": "DONE"},
        ])

        assert [t["id"] for t in board.columns["PENDING"]] == ["1", "2"]
        assert board.column_of("3") == "IN_PROGRESS"
        assert board.column_of("missing") is None

    def test_move_keeps_card_data(self):
        board = KanbanBoard([{"id": "1", "status": "PENDING", "title": "Write copy"}])

        board.move_task("1", "IN_PROGRESS")

        assert board.columns["PENDING"] == []
        assert board.columns["IN_PROGRESS"] == [{"id": "1", "status": "PENDING", "title": "Write copy"}]

    def test_unknown_column(self):
        board = KanbanBoard([{"id": "1", "status": "PENDING"}])

        with pytest.raises(KeyError):
            board.move_task("1", "ARCHIVED")

    def test_unknown_task(self):
        board = KanbanBoard()

        with pytest.raises(KeyError):
            board.move_task("1", "DONE")
