"""OAuth callback handling for Discord, Notion and Slack.

Each handler exchanges the authorization code and returns the URL of the
connections page to redirect to, carrying either the connection details or
an ``error=<provider>_<reason>`` parameter. Provider failures never escape
as exceptions.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_GUILDS_URL = "https://discord.com/api/users/@me/guilds"
NOTION_TOKEN_URL = "https://api.notion.com/v1/oauth/token"
NOTION_SEARCH_URL = "https://api.notion.com/v1/search"
NOTION_VERSION = "2022-06-28"
SLACK_TOKEN_URL = "https://slack.com/api/oauth.v2.access"


def connections_url(**params: str) -> str:
    base = f"{settings.app_url.rstrip('/')}/connections"
    return f"{base}?{urlencode(params)}" if params else base


def error_url(provider: str, reason: str) -> str:
    return connections_url(error=f"{provider}_{reason}")


def _client(transport: Optional[httpx.AsyncBaseTransport]) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.oauth_http_timeout, transport=transport)


def _json_object(response: httpx.Response) -> dict:
    """Decode a provider reply that must be a JSON object."""
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object from {response.url}")
    return payload


def _json_objects(response: httpx.Response) -> list[dict]:
    """Decode a provider reply that must be a JSON array of objects."""
    payload = response.json()
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ValueError(f"Expected a JSON array of objects from {response.url}")
    return payload


def _section(payload: dict, key: str) -> dict:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


async def discord_callback(
    code: Optional[str],
    error: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange a Discord code for a channel webhook."""
    if error:
        logger.error(f"Discord returned error: {error}")
        return error_url("discord", error)
    if not code:
        return error_url("discord", "no_code")
    if not settings.discord_client_id or not settings.discord_client_secret:
        logger.error("Discord OAuth is not configured")
        return error_url("discord", "config_error")

    try:
        async with _client(transport) as client:
            response = await client.post(
                DISCORD_TOKEN_URL,
                data={
                    "client_id": settings.discord_client_id,
                    "client_secret": settings.discord_client_secret,
                    "grant_type": "authorization_code",
                    "redirect_uri": settings.discord_redirect_uri,
                    "code": code,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
            token = _json_object(response)

            access_token = token.get("access_token")
            if not access_token:
                return error_url("discord", "no_token")

            webhook = token.get("webhook")
            if not isinstance(webhook, dict):
                return error_url("discord", "no_webhook")

            guilds = await client.get(
                DISCORD_GUILDS_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            guilds.raise_for_status()
            guild = next((g for g in _json_objects(guilds) if g.get("id") == webhook.get("guild_id")), None)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Discord callback failed: {e}")
        return error_url("discord", "callback_error")

    if guild is None:
        return error_url("discord", "guild_not_found")

    logger.info(f"Discord connection established: guild={guild.get('id')}")
    return connections_url(
        webhook_id=webhook.get("id", ""),
        webhook_url=webhook.get("url", ""),
        webhook_name=webhook.get("name", ""),
        guild_id=webhook.get("guild_id", ""),
        guild_name=guild.get("name", ""),
        channel_id=webhook.get("channel_id", ""),
    )


async def notion_callback(
    code: Optional[str],
    error: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange a Notion code for a workspace token and pick its first database."""
    if error:
        logger.error(f"Notion returned error: {error}")
        return error_url("notion", error)
    if not code:
        return error_url("notion", "no_code")
    if not settings.notion_client_id or not settings.notion_client_secret:
        logger.error("Notion OAuth is not configured")
        return error_url("notion", "config_error")

    try:
        async with _client(transport) as client:
            response = await client.post(
                NOTION_TOKEN_URL,
                json={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": settings.notion_redirect_uri,
                },
                auth=(settings.notion_client_id, settings.notion_client_secret),
                headers={"Notion-Version": NOTION_VERSION},
            )
            response.raise_for_status()
            token = _json_object(response)

            access_token = token.get("access_token")
            if not access_token:
                return error_url("notion", "no_token")

            database_id = ""
            try:
                search = await client.post(
                    NOTION_SEARCH_URL,
                    json={
                        "filter": {"value": "database", "property": "object"},
                        "sort": {"direction": "ascending", "timestamp": "last_edited_time"},
                    },
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Notion-Version": NOTION_VERSION,
                    },
                )
                search.raise_for_status()
                results = _json_object(search).get("results") or []
                if isinstance(results, list) and results and isinstance(results[0], dict):
                    database_id = results[0].get("id") or ""
            except (httpx.HTTPError, ValueError) as e:
                # The connection is still usable without a database
                logger.warning(f"Notion database search failed: {e}")
    except httpx.HTTPStatusError as e:
        logger.error(f"Notion token exchange failed: {e}")
        if e.response.status_code == 401:
            return error_url("notion", "auth_failed")
        if e.response.status_code == 403:
            return error_url("notion", "permission_denied")
        return error_url("notion", "callback_error")
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Notion callback failed: {e}")
        return error_url("notion", "callback_error")

    logger.info(f"Notion connection established: workspace={token.get('workspace_id')}")
    return connections_url(
        access_token=access_token,
        workspace_name=token.get("workspace_name") or "",
        workspace_icon=token.get("workspace_icon") or "",
        workspace_id=token.get("workspace_id") or "",
        database_id=database_id,
    )


async def slack_callback(
    code: Optional[str],
    error: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange a Slack code for a bot token and incoming webhook."""
    if error:
        logger.error(f"Slack returned error: {error}")
        return error_url("slack", error)
    if not code:
        return error_url("slack", "no_code")
    if not settings.slack_client_id or not settings.slack_client_secret:
        logger.error("Slack OAuth is not configured")
        return error_url("slack", "config_error")

    try:
        async with _client(transport) as client:
            response = await client.post(
                SLACK_TOKEN_URL,
                data={
                    "code": code,
                    "redirect_uri": settings.slack_redirect_uri,
                },
                auth=(settings.slack_client_id, settings.slack_client_secret),
            )
            response.raise_for_status()
            token = _json_object(response)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Slack callback failed: {e}")
        return error_url("slack", "callback_error")

    if not token.get("ok"):
        return error_url("slack", token.get("error") or "auth_failed")
    if not token.get("access_token"):
        return error_url("slack", "no_token")

    team = _section(token, "team")
    webhook = _section(token, "incoming_webhook")
    logger.info(f"Slack connection established: team={team.get('id')}")
    return connections_url(
        app_id=token.get("app_id") or "",
        authed_user_id=_section(token, "authed_user").get("id", ""),
        authed_user_token=token.get("access_token"),
        slack_access_token=token.get("access_token"),
        bot_user_id=token.get("bot_user_id") or "",
        team_id=team.get("id", ""),
        team_name=team.get("name", ""),
        webhook_url=webhook.get("url", ""),
        channel_id=webhook.get("channel_id", ""),
    )
