"""Redis pub/sub client relaying WebSocket broadcasts between workers."""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as aioredis
from redis.asyncio.client import PubSub

from ..config import settings

logger = logging.getLogger(__name__)

MessageHandler = Callable[[dict], Awaitable[None]]


class RedisService:
    """
    Async Redis wrapper for multi-worker deployment.

    Without a connection every caller falls back to local-only delivery, so
    a single worker runs fine with Redis down.
    """

    def __init__(self) -> None:
        self._redis: Optional[aioredis.Redis] = None
        self._pubsub: Optional[PubSub] = None
        self._listener_task: Optional[asyncio.Task] = None
        self._handlers: dict[str, list[MessageHandler]] = {}
        self._running = False

    async def connect(self) -> None:
        """Open the pooled connection and verify it with PING."""
        self._redis = aioredis.from_url(
            settings.redis_url,
            max_connections=settings.redis_max_connections,
            socket_timeout=settings.redis_socket_timeout,
            retry_on_timeout=settings.redis_retry_on_timeout,
            decode_responses=True,
        )
        await self._redis.ping()
        logger.info("Redis connected successfully")

    async def disconnect(self) -> None:
        """Stop listening and close the connection."""
        self._running = False
        if self._listener_task:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass
            self._listener_task = None
        if self._pubsub:
            await self._pubsub.close()
            self._pubsub = None
        if self._redis:
            await self._redis.close()
            self._redis = None
        logger.info("Redis disconnected")

    @property
    def client(self) -> aioredis.Redis:
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._redis

    @property
    def is_connected(self) -> bool:
        return self._redis is not None

    async def subscribe(self, channel: str, handler: MessageHandler) -> None:
        """
        Register ``handler`` for messages on a Redis channel.

        Args:
            channel: Redis channel name
            handler: Async function receiving the decoded JSON message
        """
        if channel not in self._handlers:
            self._handlers[channel] = []
            if self._pubsub:
                await self._pubsub.subscribe(channel)
        self._handlers[channel].append(handler)
        logger.debug(f"Subscribed to channel: {channel}")

    async def publish(self, channel: str, message: dict) -> int:
        """Publish a JSON message; returns the number of receiving workers."""
        return await self.client.publish(channel, json.dumps(message))

    async def start_listening(self) -> None:
        """Start the background task that dispatches incoming messages."""
        if self._running and self._listener_task is not None:
            logger.debug("Pub/sub listener already running")
            return

        self._pubsub = self.client.pubsub()
        self._running = True

        for channel in self._handlers:
            await self._pubsub.subscribe(channel)

        self._listener_task = asyncio.create_task(self._listen_loop())
        logger.info("Redis pub/sub listener started")

    async def _listen_loop(self) -> None:
        while self._running:
            try:
                if self._pubsub is None:
                    break
                message = await self._pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=1.0,
                )
                if message and message["type"] == "message":
                    channel = message["channel"]
                    data = json.loads(message["data"])
                    for handler in self._handlers.get(channel, []):
                        try:
                            await handler(data)
                        except Exception as e:
                            logger.error(f"Handler error on {channel}: {e}")
            except asyncio.CancelledError:
                break
            except Exception as e:
                if self._running:
                    logger.error(f"Pub/sub listener error: {e}")
                    await asyncio.sleep(1)
                else:
                    break

    async def health_check(self) -> dict[str, Any]:
        """Connection status and a couple of server stats."""
        try:
            if not self.is_connected:
                return {"status": "disconnected"}

            info = await self.client.info("memory")
            return {
                "status": "healthy",
                "used_memory_human": info.get("used_memory_human", "unknown"),
            }
        except Exception as e:
            return {"status": "error", "error": str(e)}


# Global singleton instance
redis_service = RedisService()
