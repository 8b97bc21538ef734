"""Tests for the Discord, Notion and Slack OAuth callbacks."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from httpx import AsyncClient

from pulseboard.config import settings
from pulseboard.services import oauth_service


def query(url: str) -> dict:
    """Single-valued query parameters of a redirect URL."""
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}


@pytest.fixture
def configured(monkeypatch):
    for provider in ("discord", "notion", "slack"):
        monkeypatch.setattr(settings, f"{provider}_client_id", f"{provider}-id")
        monkeypatch.setattr(settings, f"{provider}_client_secret", f"{provider}-secret")
        monkeypatch.setattr(settings, f"{provider}_redirect_uri", f"http://localhost:8000/api/auth/callback/{provider}")
    monkeypatch.setattr(settings, "app_url", "http://localhost:3000")


@pytest.mark.asyncio
class TestCommonFailures:
    """Failures decided before any provider call."""

    @pytest.mark.parametrize(
        "callback, provider",
        [
            (oauth_service.discord_callback, "discord"),
            (oauth_service.notion_callback, "notion"),
            (oauth_service.slack_callback, "slack"),
        ],
    )
    async def test_provider_error_and_missing_code(self, configured, callback, provider):
        denied = await callback(None, error="access_denied")
        no_code = await callback(None)

        assert denied == f"http://localhost:3000/connections?error={provider}_access_denied"
        assert query(no_code) == {"error": f"{provider}_no_code"}

    async def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "slack_client_id", "")

        url = await oauth_service.slack_callback("code-1")

        assert query(url) == {"error": "slack_config_error"}


@pytest.mark.asyncio
class TestDiscord:
    """Tests for the Discord exchange."""

    WEBHOOK = {
        "id": "wh1",
        "url": "https://discord.com/api/webhooks/wh1/token",
        "name": "Pulseboard",
        "guild_id": "g1",
        "channel_id": "c1",
    }

    async def test_success(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/oauth2/token":
                assert b"code=code-1" in request.content
                return httpx.Response(200, json={"access_token": "at", "webhook": self.WEBHOOK})
            assert request.headers["Authorization"] == "Bearer at"
            return httpx.Response(200, json=[{"id": "g0", "name": "Other"}, {"id": "g1", "name": "Acme"}])

        url = await oauth_service.discord_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url) == {
            "webhook_id": "wh1",
            "webhook_url": "https://discord.com/api/webhooks/wh1/token",
            "webhook_name": "Pulseboard",
            "guild_id": "g1",
            "guild_name": "Acme",
            "channel_id": "c1",
        }

    async def test_no_webhook(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"access_token": "at"}))

        url = await oauth_service.discord_callback("code-1", transport=transport)

        assert query(url) == {"error": "discord_no_webhook"}

    async def test_guild_not_found(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/oauth2/token":
                return httpx.Response(200, json={"access_token": "at", "webhook": self.WEBHOOK})
            return httpx.Response(200, json=[{"id": "g0", "name": "Other"}])

        url = await oauth_service.discord_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url) == {"error": "discord_guild_not_found"}

    async def test_token_exchange_fails(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

        url = await oauth_service.discord_callback("code-1", transport=transport)

        assert query(url) == {"error": "discord_callback_error"}

    @pytest.mark.parametrize(
        "guilds_reply",
        [
            {"text": "<html>rate limited</html>"},
            {"json": {"message": "401: Unauthorized", "code": 0}},
            {"json": ["g1"]},
        ],
    )
    async def test_malformed_guilds_reply(self, configured, guilds_reply):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/oauth2/token":
                return httpx.Response(200, json={"access_token": "at", "webhook": self.WEBHOOK})
            return httpx.Response(200, **guilds_reply)

        url = await oauth_service.discord_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url) == {"error": "discord_callback_error"}

    async def test_token_reply_is_not_an_object(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["at"]))

        url = await oauth_service.discord_callback("code-1", transport=transport)

        assert query(url) == {"error": "discord_callback_error"}


@pytest.mark.asyncio
class TestNotion:
    """Tests for the Notion exchange."""

    async def test_success_picks_first_database(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth/token":
                return httpx.Response(
                    200,
                    json={"access_token": "secret_1", "workspace_name": "Acme", "workspace_id": "ws1"},
                )
            return httpx.Response(200, json={"results": [{"id": "db1"}, {"id": "db2"}]})

        url = await oauth_service.notion_callback("code-1", transport=httpx.MockTransport(handler))

        params = query(url)
        assert params["access_token"] == "secret_1"
        assert params["workspace_name"] == "Acme"
        assert params["database_id"] == "db1"

    async def test_search_failure_still_connects(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth/token":
                return httpx.Response(200, json={"access_token": "secret_1", "workspace_id": "ws1"})
            return httpx.Response(500)

        url = await oauth_service.notion_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url)["access_token"] == "secret_1"
        assert "error" not in query(url)

    async def test_malformed_search_reply_still_connects(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/oauth/token":
                return httpx.Response(200, json={"access_token": "secret_1", "workspace_id": "ws1"})
            return httpx.Response(200, json={"results": {"id": "db1"}})

        url = await oauth_service.notion_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url)["access_token"] == "secret_1"
        assert url.endswith("database_id=")

    async def test_token_reply_is_not_an_object(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json="secret_1"))

        url = await oauth_service.notion_callback("code-1", transport=transport)

        assert query(url) == {"error": "notion_callback_error"}

    @pytest.mark.parametrize(
        "status_code, reason",
        [(401, "auth_failed"), (403, "permission_denied"), (500, "callback_error")],
    )
    async def test_token_exchange_status(self, configured, status_code, reason):
        transport = httpx.MockTransport(lambda request: httpx.Response(status_code))

        url = await oauth_service.notion_callback("code-1", transport=transport)

        assert query(url) == {"error": f"notion_{reason}"}


@pytest.mark.asyncio
class TestSlack:
    """Tests for the Slack exchange."""

    async def test_success(self, configured):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200,
                json={
                    "ok": True,
                    "app_id": "A1",
                    "access_token": "xoxb-1",
                    "bot_user_id": "B1",
                    "authed_user": {"id": "U1"},
                    "team": {"id": "T1", "name": "Acme"},
                    "incoming_webhook": {"url": "https://hooks.slack.com/services/1", "channel_id": "C1"},
                },
            )
        )

        url = await oauth_service.slack_callback("code-1", transport=transport)

        params = query(url)
        assert params["team_id"] == "T1"
        assert params["slack_access_token"] == "xoxb-1"
        assert params["webhook_url"] == "https://hooks.slack.com/services/1"

    async def test_not_ok(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": False, "error": "invalid_code"}))

        url = await oauth_service.slack_callback("code-1", transport=transport)

        assert query(url) == {"error": "slack_invalid_code"}

    @pytest.mark.parametrize(
        "reply",
        [{"text": "<html>bad gateway</html>"}, {"json": [{"ok": True}]}],
    )
    async def test_malformed_reply(self, configured, reply):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, **reply))

        url = await oauth_service.slack_callback("code-1", transport=transport)

        assert query(url) == {"error": "slack_callback_error"}

    async def test_unexpected_sections_are_ignored(self, configured):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200, json={"ok": True, "access_token": "xoxb-1", "team": "T1", "incoming_webhook": None},
            )
        )

        url = await oauth_service.slack_callback("code-1", transport=transport)

        params = query(url)
        assert params["slack_access_token"] == "xoxb-1"
        assert "error" not in params

    async def test_network_failure(self, configured):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        url = await oauth_service.slack_callback("code-1", transport=httpx.MockTransport(handler))

        assert query(url) == {"error": "slack_callback_error"}


@pytest.mark.asyncio
class TestCallbackRoutes:
    """The HTTP callbacks redirect to the connections page."""

    async def test_error_redirects(self, client: AsyncClient, configured):
        response = await client.get("/api/auth/callback/discord", params={"error": "access_denied"})

        assert response.status_code == 307
        assert response.headers["location"] == "http://localhost:3000/connections?error=discord_access_denied"

    async def test_missing_code_redirects(self, client: AsyncClient, configured):
        response = await client.get("/api/auth/callback/notion")

        assert response.status_code == 307
        assert query(response.headers["location"]) == {"error": "notion_no_code"}
