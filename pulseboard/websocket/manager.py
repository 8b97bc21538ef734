"""WebSocket connection manager with channel subscriptions and Redis fan-out.

Connections subscribe to named channels (``projects``, ``tasks``,
``members`` and their own ``notifications-<id>``). A broadcast on a
channel reaches every subscribed connection on every worker: it is
published to Redis when connected and fanned out locally otherwise.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from fastapi import WebSocket

from ..config import settings
from ..services.redis_service import redis_service

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    """Control message types exchanged with clients.

    Domain events (``task-created`` and friends) travel with their own
    event name as ``type``; see ``events.py``.
    """

    CONNECTED = "connected"
    ERROR = "error"

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"

    PING = "ping"
    PONG = "pong"


@dataclass
class WebSocketConnection:
    """A live socket and the identity that opened it."""

    websocket: WebSocket
    user_id: str
    connected_at: datetime = field(default_factory=datetime.utcnow)
    channels: set[str] = field(default_factory=set)

    def __hash__(self) -> int:
        return id(self.websocket)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WebSocketConnection):
            return False
        return id(self.websocket) == id(other.websocket)


class ConnectionManager:
    """
    Tracks open sockets and their channel subscriptions.

    Features:
    - Channel subscriptions for targeted broadcasts
    - Redis pub/sub for cross-worker delivery, local fan-out without Redis
    - Per-user connection cap
    """

    _BROADCAST_CHANNEL = "ws:broadcast"

    def __init__(self) -> None:
        # channel -> subscribed connections
        self._channels: dict[str, set[WebSocketConnection]] = {}
        # websocket -> connection wrapper
        self._connections: dict[WebSocket, WebSocketConnection] = {}
        # user id -> that user's connections
        self._user_connections: dict[str, set[WebSocketConnection]] = {}
        self._lock = asyncio.Lock()
        self._redis_initialized = False

    async def initialize_redis(self) -> None:
        """Register the Redis handler that relays broadcasts from other workers."""
        if self._redis_initialized:
            return

        await redis_service.subscribe(self._BROADCAST_CHANNEL, self._handle_redis_broadcast)
        self._redis_initialized = True
        logger.info("ConnectionManager Redis pub/sub initialized")

    async def _handle_redis_broadcast(self, data: dict) -> None:
        channel = data.get("channel")
        message = data.get("message")
        if not channel or not message:
            return
        await self._send_local(channel, message)

    @property
    def total_connections(self) -> int:
        return len(self._connections)

    @property
    def total_channels(self) -> int:
        return len(self._channels)

    def get_channel_count(self, channel: str) -> int:
        """Number of connections subscribed to ``channel`` on this worker."""
        return len(self._channels.get(channel, set()))

    def get_user_connections_count(self, user_id: str) -> int:
        return len(self._user_connections.get(user_id, set()))

    async def connect(
        self,
        websocket: WebSocket,
        user_id: str,
        initial_channels: Optional[list[str]] = None,
    ) -> Optional[WebSocketConnection]:
        """
        Accept a WebSocket connection and register it.

        Args:
            websocket: The WebSocket instance
            user_id: The authenticated user's external id
            initial_channels: Channels to subscribe immediately

        Returns:
            The connection wrapper, or None if the per-user cap was reached
        """
        current_connections = len(self._user_connections.get(user_id, set()))
        if current_connections >= settings.ws_max_connections_per_user:
            logger.warning(
                f"Connection limit reached for user {user_id}: "
                f"{current_connections}/{settings.ws_max_connections_per_user}"
            )
            await websocket.close(code=4029, reason="Too many connections")
            return None

        await websocket.accept()

        connection = WebSocketConnection(websocket=websocket, user_id=user_id)

        async with self._lock:
            self._connections[websocket] = connection
            self._user_connections.setdefault(user_id, set()).add(connection)

        for channel in initial_channels or []:
            await self.subscribe(connection, channel, confirm=False)

        logger.info(
            f"WebSocket connected: user={user_id}, "
            f"total_connections={self.total_connections}"
        )

        await self.send_personal(
            connection,
            {
                "type": MessageType.CONNECTED.value,
                "data": {
                    "user_id": user_id,
                    "connected_at": connection.connected_at.isoformat(),
                    "channels": sorted(connection.channels),
                },
            },
        )
        return connection

    async def disconnect(self, websocket: WebSocket) -> None:
        """Drop a socket and every subscription it held."""
        async with self._lock:
            connection = self._connections.pop(websocket, None)
            if connection is None:
                return

            user_connections = self._user_connections.get(connection.user_id)
            if user_connections is not None:
                user_connections.discard(connection)
                if not user_connections:
                    del self._user_connections[connection.user_id]

            for channel in list(connection.channels):
                subscribers = self._channels.get(channel)
                if subscribers is not None:
                    subscribers.discard(connection)
                    if not subscribers:
                        del self._channels[channel]

        logger.info(
            f"WebSocket disconnected: user={connection.user_id}, "
            f"total_connections={self.total_connections}"
        )

    async def subscribe(
        self,
        connection: WebSocketConnection,
        channel: str,
        confirm: bool = True,
    ) -> None:
        """Add ``connection`` to ``channel``. Authorization is the caller's job."""
        async with self._lock:
            self._channels.setdefault(channel, set()).add(connection)
            connection.channels.add(channel)

        if confirm:
            await self.send_personal(
                connection,
                {"type": MessageType.SUBSCRIBED.value, "data": {"channel": channel}},
            )

    async def unsubscribe(self, connection: WebSocketConnection, channel: str) -> None:
        async with self._lock:
            subscribers = self._channels.get(channel)
            if subscribers is not None:
                subscribers.discard(connection)
                if not subscribers:
                    del self._channels[channel]
            connection.channels.discard(channel)

        await self.send_personal(
            connection,
            {"type": MessageType.UNSUBSCRIBED.value, "data": {"channel": channel}},
        )

    async def send_personal(
        self,
        connection: WebSocketConnection,
        message: dict[str, Any],
    ) -> bool:
        """Send to one connection; False when the socket is gone."""
        try:
            await connection.websocket.send_json(message)
            return True
        except Exception:
            return False

    async def _send_local(self, channel: str, message: dict[str, Any]) -> int:
        connections = self._channels.get(channel, set()).copy()
        if not connections:
            return 0

        results = await asyncio.gather(
            *(self.send_personal(conn, message) for conn in connections),
            return_exceptions=True,
        )
        success_count = sum(1 for r in results if r is True)
        logger.debug(f"Broadcast to {channel}: {success_count}/{len(connections)} successful")
        return success_count

    async def broadcast_to_channel(self, channel: str, message: dict[str, Any]) -> int:
        """
        Broadcast a message to every subscriber of ``channel`` on all workers.

        Returns:
            int: Number of local subscribers (Redis delivers to the rest)
        """
        if redis_service.is_connected:
            await redis_service.publish(
                self._BROADCAST_CHANNEL,
                {"channel": channel, "message": message},
            )
            # Redis echoes to this worker too via _handle_redis_broadcast
            return self.get_channel_count(channel)

        return await self._send_local(channel, message)

    def get_channel_users(self, channel: str) -> list[str]:
        """Distinct user ids subscribed to ``channel`` on this worker."""
        return list({conn.user_id for conn in self._channels.get(channel, set())})


# Global singleton instance
manager = ConnectionManager()
