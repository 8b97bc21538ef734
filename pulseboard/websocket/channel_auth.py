"""Channel authorization for WebSocket subscriptions.

Shared channels are open to any authenticated user; a
``notifications-<id>`` channel is open only to the user it belongs to.
"""

import logging

from .events import NOTIFICATIONS_PREFIX, is_known_channel

logger = logging.getLogger(__name__)


async def check_channel_access(user_id: str, channel: str) -> bool:
    """
    Check whether ``user_id`` may subscribe to ``channel``.

    Args:
        user_id: The subscriber's external identity id
        channel: Channel name requested by the client

    Returns:
        bool: True if the subscription is allowed
    """
    if not channel or not is_known_channel(channel):
        logger.warning(f"[Channel Auth] DENIED - unknown channel: {channel}")
        return False

    if channel.startswith(NOTIFICATIONS_PREFIX):
        owner = channel[len(NOTIFICATIONS_PREFIX):]
        if owner != user_id:
            logger.warning(f"[Channel Auth] DENIED - {user_id} asked for {channel}")
            return False

    return True
