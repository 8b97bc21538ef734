"""Unit tests for the real-time layer: events, channel auth, manager and routing."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from pulseboard.config import settings
from pulseboard.main import app
from pulseboard.services.auth_service import create_access_token
from pulseboard.websocket.channel_auth import check_channel_access
from pulseboard.websocket.events import (
    EVENT_NAMES,
    EVENT_TYPES,
    MemberRoleUpdated,
    NewNotification,
    TaskCreated,
    TaskUpdated,
    is_known_channel,
    notifications_channel,
    parse_event,
)
from pulseboard.websocket.handlers import Broadcaster, route_incoming_message
from pulseboard.websocket.manager import ConnectionManager, MessageType, WebSocketConnection


class TestEvents:
    """Tests for event variants and wire frames."""

    def test_event_names_are_unique(self):
        assert len(EVENT_NAMES) == len(EVENT_TYPES)

    def test_frame_shape(self):
        task_id = uuid4()
        event = TaskUpdated(task_id=task_id, updates={"status": "DONE"})

        frame = event.to_frame("tasks")

        assert frame == {
            "type": "task-updated",
            "channel": "tasks",
            "data": {"task_id": str(task_id), "updates": {"status": "DONE"}},
        }

    def test_parse_event_restores_variant(self):
        member_id = uuid4()
        frame = MemberRoleUpdated(member_id=member_id, role="CLIENT", member_name="Carl").to_frame("members")

        event = parse_event(frame)

        assert isinstance(event, MemberRoleUpdated)
        assert event.member_id == member_id
        assert event.role == "CLIENT"

    def test_parse_unknown_event(self):
        with pytest.raises(ValidationError):
            parse_event({"type": "task-exploded", "channel": "tasks", "data": {}})

    def test_parse_malformed_payload(self):
        with pytest.raises(ValidationError):
            parse_event({"type": "task-created", "channel": "tasks", "data": {"task": "not a dict"}})

    def test_default_channels(self):
        assert TaskCreated.channel.value == "tasks"
        assert MemberRoleUpdated.channel.value == "members"
        assert NewNotification.channel is None

    def test_known_channels(self):
        assert is_known_channel("projects")
        assert is_known_channel(notifications_channel("user_1"))
        assert not is_known_channel("notifications-")
        assert not is_known_channel("billing")


@pytest.mark.asyncio
class TestChannelAuth:
    """Tests for subscription authorization."""

    async def test_shared_channels_are_open(self):
        assert await check_channel_access("user_1", "tasks") is True

    async def test_own_notifications(self):
        assert await check_channel_access("user_1", "notifications-user_1") is True

    async def test_someone_elses_notifications(self):
        assert await check_channel_access("user_1", "notifications-user_2") is False

    async def test_unknown_channel(self):
        assert await check_channel_access("user_1", "admin-secrets") is False
        assert await check_channel_access("user_1", "") is False


@pytest.mark.asyncio
class TestConnectionManager:
    """Tests for connections, subscriptions and local fan-out."""

    async def test_connect_sends_connected_frame(self):
        mgr = ConnectionManager()
        mock_ws = AsyncMock()

        connection = await mgr.connect(mock_ws, "user_1", initial_channels=["tasks"])

        assert connection.user_id == "user_1"
        assert mgr.total_connections == 1
        assert mgr.get_channel_count("tasks") == 1
        mock_ws.accept.assert_called_once()
        frame = mock_ws.send_json.call_args.args[0]
        assert frame["type"] == "connected"
        assert frame["data"]["channels"] == ["tasks"]

    async def test_disconnect_drops_subscriptions(self):
        mgr = ConnectionManager()
        mock_ws = AsyncMock()
        await mgr.connect(mock_ws, "user_1", initial_channels=["tasks", "projects"])

        await mgr.disconnect(mock_ws)

        assert mgr.total_connections == 0
        assert mgr.total_channels == 0
        assert mgr.get_user_connections_count("user_1") == 0

    async def test_subscribe_and_unsubscribe_confirm(self):
        mgr = ConnectionManager()
        mock_ws = AsyncMock()
        connection = await mgr.connect(mock_ws, "user_1")
        mock_ws.send_json.reset_mock()

        await mgr.subscribe(connection, "projects")
        await mgr.unsubscribe(connection, "projects")

        sent = [call.args[0] for call in mock_ws.send_json.call_args_list]
        assert sent == [
            {"type": "subscribed", "data": {"channel": "projects"}},
            {"type": "unsubscribed", "data": {"channel": "projects"}},
        ]
        assert mgr.get_channel_count("projects") == 0

    async def test_broadcast_reaches_only_subscribers(self):
        mgr = ConnectionManager()
        subscriber_ws = AsyncMock()
        bystander_ws = AsyncMock()
        await mgr.connect(subscriber_ws, "user_1", initial_channels=["tasks"])
        await mgr.connect(bystander_ws, "user_2", initial_channels=["projects"])
        subscriber_ws.send_json.reset_mock()
        bystander_ws.send_json.reset_mock()

        recipients = await mgr.broadcast_to_channel("tasks", {"type": "task-deleted", "data": {}})

        assert recipients == 1
        subscriber_ws.send_json.assert_called_once_with({"type": "task-deleted", "data": {}})
        bystander_ws.send_json.assert_not_called()

    async def test_broadcast_skips_dead_sockets(self):
        mgr = ConnectionManager()
        alive_ws = AsyncMock()
        dead_ws = AsyncMock()
        await mgr.connect(alive_ws, "user_1", initial_channels=["tasks"])
        await mgr.connect(dead_ws, "user_2", initial_channels=["tasks"])
        dead_ws.send_json.side_effect = RuntimeError("socket closed")

        recipients = await mgr.broadcast_to_channel("tasks", {"type": "task-deleted", "data": {}})

        assert recipients == 1

    async def test_connection_limit(self, monkeypatch):
        monkeypatch.setattr(settings, "ws_max_connections_per_user", 1)
        mgr = ConnectionManager()
        await mgr.connect(AsyncMock(), "user_1")
        rejected_ws = AsyncMock()

        connection = await mgr.connect(rejected_ws, "user_1")

        assert connection is None
        rejected_ws.close.assert_called_once_with(code=4029, reason="Too many connections")

    async def test_connection_equality_follows_socket(self):
        mock_ws = MagicMock()

        assert WebSocketConnection(mock_ws, "a") == WebSocketConnection(mock_ws, "b")
        assert WebSocketConnection(mock_ws, "a") != WebSocketConnection(MagicMock(), "a")


@pytest.mark.asyncio
class TestRouteIncomingMessage:
    """Tests for client-to-server message routing."""

    async def _connection(self, mgr: ConnectionManager, user_id: str = "user_1"):
        mock_ws = AsyncMock()
        connection = await mgr.connect(mock_ws, user_id)
        mock_ws.send_json.reset_mock()
        return connection, mock_ws

    async def test_ping_gets_pong(self):
        mgr = ConnectionManager()
        connection, mock_ws = await self._connection(mgr)

        await route_incoming_message(connection, {"type": "ping"}, connection_manager=mgr)

        mock_ws.send_json.assert_called_once_with({"type": MessageType.PONG.value, "data": {}})

    async def test_subscribe_allowed(self):
        mgr = ConnectionManager()
        connection, _ = await self._connection(mgr)

        await route_incoming_message(
            connection,
            {"type": "subscribe", "data": {"channel": "notifications-user_1"}},
            connection_manager=mgr,
            channel_authorizer=check_channel_access,
        )

        assert "notifications-user_1" in connection.channels

    async def test_subscribe_denied(self):
        mgr = ConnectionManager()
        connection, mock_ws = await self._connection(mgr)

        await route_incoming_message(
            connection,
            {"type": "subscribe", "data": {"channel": "notifications-user_2"}},
            connection_manager=mgr,
            channel_authorizer=check_channel_access,
        )

        assert connection.channels == set()
        frame = mock_ws.send_json.call_args.args[0]
        assert frame["type"] == "error"
        assert frame["data"]["error"] == "UNAUTHORIZED"

    async def test_unsubscribe(self):
        mgr = ConnectionManager()
        connection, _ = await self._connection(mgr)
        await mgr.subscribe(connection, "tasks", confirm=False)

        await route_incoming_message(
            connection, {"type": "unsubscribe", "data": {"channel": "tasks"}}, connection_manager=mgr,
        )

        assert connection.channels == set()

    async def test_unknown_type_is_ignored(self):
        mgr = ConnectionManager()
        connection, mock_ws = await self._connection(mgr)

        await route_incoming_message(connection, {"type": "task-created", "data": {}}, connection_manager=mgr)

        mock_ws.send_json.assert_not_called()


@pytest.mark.asyncio
class TestBroadcaster:
    """Tests for publishing events."""

    async def test_publish_on_default_channel(self):
        mgr = ConnectionManager()
        mock_ws = AsyncMock()
        await mgr.connect(mock_ws, "user_1", initial_channels=["tasks"])
        mock_ws.send_json.reset_mock()
        task_id = uuid4()

        result = await Broadcaster(mgr).publish(TaskUpdated(task_id=task_id, updates={"title": "New"}))

        assert result.success is True
        assert result.recipients == 1
        assert result.channel == "tasks"
        assert mock_ws.send_json.call_args.args[0]["type"] == "task-updated"

    async def test_notify_user_uses_private_channel(self):
        mgr = ConnectionManager()
        mock_ws = AsyncMock()
        await mgr.connect(mock_ws, "user_1", initial_channels=["notifications-user_1"])

        result = await Broadcaster(mgr).notify_user("user_1", {"title": "Hi"})

        assert result.channel == "notifications-user_1"
        assert result.message_type == "new-notification"
        assert result.recipients == 1

    async def test_failure_is_reported_not_raised(self):
        mgr = ConnectionManager()
        mgr.broadcast_to_channel = AsyncMock(side_effect=RuntimeError("redis down"))

        result = await Broadcaster(mgr).publish(TaskUpdated(task_id=uuid4(), updates={}))

        assert result.success is False
        assert result.recipients == 0

    async def test_notification_needs_channel(self):
        with pytest.raises(ValueError):
            await Broadcaster(ConnectionManager()).publish(NewNotification(notification={}))


class TestWebSocketEndpoint:
    """Tests for the /ws handshake."""

    def test_missing_token(self):
        client = TestClient(app)

        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws"):
                pass

        assert exc_info.value.code == 4001

    def test_invalid_token(self):
        client = TestClient(app)

        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws?token=not-a-jwt"):
                pass

        assert exc_info.value.code == 4001

    def test_ping_pong(self):
        client = TestClient(app)
        token = create_access_token(data={"sub": "user_ws", "email": "ws@example.com"})

        with client.websocket_connect(f"/ws?token={token}") as websocket:
            connected = websocket.receive_json()
            websocket.send_json({"type": "ping"})
            pong = websocket.receive_json()

        assert connected["type"] == "connected"
        assert connected["data"]["user_id"] == "user_ws"
        assert pong == {"type": "pong", "data": {}}
