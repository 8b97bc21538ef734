"""Server-side publishing of real-time events and routing of client messages."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .events import NewNotification, notifications_channel
from .manager import ConnectionManager, MessageType, WebSocketConnection, manager

logger = logging.getLogger(__name__)

ChannelAuthorizer = Callable[[str, str], Awaitable[bool]]


@dataclass
class BroadcastResult:
    """Result of a broadcast operation."""

    channel: str
    recipients: int
    message_type: str
    success: bool


class Broadcaster:
    """
    Publishes typed events to their channels.

    Publishing is best effort: a failure is logged and reported in the
    result, never raised, so a broken socket or Redis outage can not undo
    the database change that triggered the event.
    """

    def __init__(self, connection_manager: Optional[ConnectionManager] = None) -> None:
        self._manager = connection_manager or manager

    async def publish(self, event, channel: Optional[str] = None) -> BroadcastResult:
        """
        Send ``event`` on ``channel`` (defaults to the event's own channel).

        Args:
            event: One of the variants in ``events.RealtimeEvent``
            channel: Override channel, required for notification events

        Returns:
            BroadcastResult describing the delivery attempt
        """
        target = channel or (event.channel.value if event.channel else None)
        if target is None:
            raise ValueError(f"No channel for event {event.event}")

        try:
            recipients = await self._manager.broadcast_to_channel(target, event.to_frame(target))
        except Exception as e:
            logger.error(f"Broadcast failed: channel={target}, event={event.event}: {e}")
            return BroadcastResult(channel=target, recipients=0, message_type=event.event, success=False)

        logger.info(f"Broadcast: channel={target}, event={event.event}, recipients={recipients}")
        return BroadcastResult(channel=target, recipients=recipients, message_type=event.event, success=True)

    async def notify_user(self, clerk_id: str, notification: dict[str, Any]) -> BroadcastResult:
        """Push a stored notification to its recipient's private channel."""
        return await self.publish(
            NewNotification(notification=notification),
            channel=notifications_channel(clerk_id),
        )


broadcaster = Broadcaster()


def get_broadcaster() -> Broadcaster:
    """FastAPI dependency for the event broadcaster."""
    return broadcaster


async def route_incoming_message(
    connection: WebSocketConnection,
    data: dict[str, Any],
    connection_manager: Optional[ConnectionManager] = None,
    channel_authorizer: Optional[ChannelAuthorizer] = None,
) -> None:
    """
    Route a message received from a client.

    Clients only manage their subscriptions and keepalive; all domain
    events flow server to client.

    Args:
        connection: The connection that sent the message
        data: The parsed message
        connection_manager: Optional custom manager (defaults to global)
        channel_authorizer: Async callable(user_id, channel) -> bool
    """
    mgr = connection_manager or manager
    message_type = data.get("type")
    payload = data.get("data") or {}

    logger.debug(f"Routing message: user={connection.user_id}, type={message_type}")

    if message_type == MessageType.PING.value:
        await mgr.send_personal(connection, {"type": MessageType.PONG.value, "data": {}})

    elif message_type == MessageType.SUBSCRIBE.value:
        channel = payload.get("channel")
        if not channel:
            return
        if channel_authorizer and not await channel_authorizer(connection.user_id, channel):
            logger.warning(f"Channel access denied: user={connection.user_id}, channel={channel}")
            await mgr.send_personal(
                connection,
                {
                    "type": MessageType.ERROR.value,
                    "data": {
                        "error": "UNAUTHORIZED",
                        "message": f"Access denied to channel: {channel}",
                    },
                },
            )
            return
        await mgr.subscribe(connection, channel)

    elif message_type == MessageType.UNSUBSCRIBE.value:
        channel = payload.get("channel")
        if channel:
            await mgr.unsubscribe(connection, channel)

    elif message_type == MessageType.PONG.value:
        pass

    else:
        logger.debug(f"Unhandled message type: {message_type} from user {connection.user_id}")
