"""WebSocket module for real-time updates."""

from .channel_auth import check_channel_access
from .events import (
    EVENT_NAMES,
    EVENT_TYPES,
    Channel,
    RealtimeEvent,
    notifications_channel,
    parse_event,
)
from .handlers import (
    Broadcaster,
    BroadcastResult,
    broadcaster,
    get_broadcaster,
    route_incoming_message,
)
from .manager import (
    ConnectionManager,
    MessageType,
    WebSocketConnection,
    manager,
)

__all__ = [
    # Manager
    "ConnectionManager",
    "MessageType",
    "WebSocketConnection",
    "manager",
    # Events
    "Channel",
    "EVENT_NAMES",
    "EVENT_TYPES",
    "RealtimeEvent",
    "notifications_channel",
    "parse_event",
    # Publishing
    "Broadcaster",
    "BroadcastResult",
    "broadcaster",
    "get_broadcaster",
    "route_incoming_message",
    # Channel authorization
    "check_channel_access",
]
