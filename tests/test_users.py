"""Tests for user profile and role management."""

import json
from uuid import uuid4

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pulseboard.config import settings
from pulseboard.models import User
from pulseboard.schemas.user import Role
from pulseboard.services import clerk_client
from pulseboard.services.user_service import UserService, sync_user
from pulseboard.websocket.events import MemberRoleUpdated


@pytest.mark.asyncio
class TestProfile:
    """Tests for /api/users/me."""

    async def test_get_me(self, client: AsyncClient, headers, employee: User):
        response = await client.get("/api/users/me", headers=headers(employee))

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(employee.id)
        assert data["role"] == "EMPLOYEE"
        assert data["credits"] == "Unlimited"

    async def test_get_role(self, client: AsyncClient, headers, team_leader: User):
        response = await client.get("/api/users/me/role", headers=headers(team_leader))

        assert response.json() == {"role": "TEAM_LEADER"}

    async def test_update_profile_dedupes_skills(self, client: AsyncClient, headers, employee: User):
        response = await client.put(
            "/api/users/me",
            json={"skills": ["python", " python ", "", "react"], "experience": 4},
            headers=headers(employee),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["skills"] == ["python", "react"]
        assert data["experience"] == 4
        assert data["role"] == "EMPLOYEE"

    async def test_negative_experience_rejected(self, client: AsyncClient, headers, employee: User):
        response = await client.put("/api/users/me", json={"experience": -2}, headers=headers(employee))

        assert response.status_code == 400
        assert response.json()["error"].startswith("experience")


@pytest.mark.asyncio
class TestListUsers:
    """Tests for the user directory."""

    async def test_filter_by_role(
        self, client: AsyncClient, headers, manager: User, employee: User, other_employee: User, client_user: User,
    ):
        response = await client.get("/api/users", params={"role": "EMPLOYEE"}, headers=headers(manager))

        assert {user["id"] for user in response.json()} == {str(employee.id), str(other_employee.id)}

    async def test_employee_can_not_list(self, client: AsyncClient, headers, employee: User):
        response = await client.get("/api/users", headers=headers(employee))

        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to view users"


@pytest.mark.asyncio
class TestRoleManagement:
    """Tests for PUT /api/users/{id}/role."""

    async def test_manager_promotes_employee(
        self, client: AsyncClient, headers, db_session: AsyncSession, broadcaster, manager: User, employee: User,
    ):
        response = await client.put(
            f"/api/users/{employee.id}/role",
            json={"role": "TEAM_LEADER"},
            headers=headers(manager),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Role updated"
        await db_session.refresh(employee)
        assert employee.role == "TEAM_LEADER"

        updated = broadcaster.events(MemberRoleUpdated)
        assert len(updated) == 1
        assert updated[0].member_id == employee.id
        assert updated[0].role == "TEAM_LEADER"
        assert updated[0].member_name == "Eve Employee"

    async def test_admin_role_can_not_be_assigned(
        self, client: AsyncClient, headers, db_session: AsyncSession, manager: User, employee: User,
    ):
        response = await client.put(
            f"/api/users/{employee.id}/role",
            json={"role": "ADMIN"},
            headers=headers(manager),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Role ADMIN can not be assigned"
        await db_session.refresh(employee)
        assert employee.role == "EMPLOYEE"

    async def test_team_leader_can_not_manage_roles(
        self, client: AsyncClient, headers, team_leader: User, employee: User,
    ):
        response = await client.put(
            f"/api/users/{employee.id}/role",
            json={"role": "MANAGER"},
            headers=headers(team_leader),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to manage roles"

    async def test_unknown_user(self, client: AsyncClient, headers, manager: User):
        response = await client.put(f"/api/users/{uuid4()}/role", json={"role": "CLIENT"}, headers=headers(manager))

        assert response.status_code == 404

    async def test_unknown_role_rejected(self, client: AsyncClient, headers, manager: User, employee: User):
        response = await client.put(
            f"/api/users/{employee.id}/role",
            json={"role": "INTERN"},
            headers=headers(manager),
        )

        assert response.status_code == 400

    async def test_role_is_mirrored_to_identity_provider(
        self, db_session: AsyncSession, broadcaster, monkeypatch, manager: User, employee: User,
    ):
        monkeypatch.setattr(settings, "clerk_secret_key", "sk_test_123")
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={})

        service = UserService(db_session, broadcaster)
        await service.update_user_role(manager, employee.id, Role.CLIENT, transport=httpx.MockTransport(handler))

        assert len(requests) == 1
        assert requests[0].method == "PATCH"
        assert requests[0].url.path == f"/v1/users/{employee.clerk_id}/metadata"
        assert requests[0].headers["Authorization"] == "Bearer sk_test_123"
        assert json.loads(requests[0].content) == {"public_metadata": {"role": "CLIENT"}}

    async def test_provider_failure_keeps_local_role(
        self, db_session: AsyncSession, broadcaster, monkeypatch, manager: User, employee: User,
    ):
        monkeypatch.setattr(settings, "clerk_secret_key", "sk_test_123")
        transport = httpx.MockTransport(lambda request: httpx.Response(500))

        service = UserService(db_session, broadcaster)
        user = await service.update_user_role(manager, employee.id, Role.MANAGER, transport=transport)

        assert user.role == "MANAGER"
        assert len(broadcaster.events(MemberRoleUpdated)) == 1


@pytest.mark.asyncio
class TestClerkClient:
    """Tests for push_role_metadata."""

    async def test_skips_without_secret_key(self, monkeypatch):
        monkeypatch.setattr(settings, "clerk_secret_key", "")

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await clerk_client.push_role_metadata("user_1", "CLIENT", transport=httpx.MockTransport(handler)) is False

    async def test_network_error_returns_false(self, monkeypatch):
        monkeypatch.setattr(settings, "clerk_secret_key", "sk_test_123")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await clerk_client.push_role_metadata("user_1", "CLIENT", transport=httpx.MockTransport(handler)) is False


@pytest.mark.asyncio
class TestSyncUser:
    """Tests for provisioning users from identity provider data."""

    async def test_new_user_is_client(self, db_session: AsyncSession):
        user, created = await sync_user(db_session, "user_new", "new@example.com", name="New Person")

        assert created is True
        assert user.role == "CLIENT"
        assert user.name == "New Person"

    async def test_existing_user_keeps_role(self, db_session: AsyncSession, manager: User):
        user, created = await sync_user(db_session, manager.clerk_id, "maria@example.com")

        assert created is False
        assert user.id == manager.id
        assert user.role == "MANAGER"
        assert user.email == "maria@example.com"
        assert user.name == "Maria Manager"
