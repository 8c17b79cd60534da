"""
Queue Producer.

Publishes detected release messages to a Redis Stream read by the notifier.
"""

import json
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from core.cache.cache_keys import CacheKeys
from core.config import get_settings
from core.logging import get_logger
from packages.shared.types import ReleaseMessage

logger = get_logger("queue")


class QueueProducer:
    """
    Redis Streams producer for the release pipeline.

    Features:
    - Lazy connection on first publish
    - Stream trimming to prevent unbounded growth
    - Errors surface to the caller, which decides whether to log or retry
    """

    STREAM_KEY = CacheKeys.RELEASES_STREAM
    MAX_STREAM_LEN = 100000

    def __init__(
        self,
        redis_url: Optional[str] = None,
        stream_key: Optional[str] = None,
        max_stream_len: int = MAX_STREAM_LEN,
    ):
        settings = get_settings()
        self.redis_url = redis_url or settings.redis_connection_url
        self.stream_key = stream_key or settings.releases_stream_key or self.STREAM_KEY
        self.max_stream_len = max_stream_len
        self._client: Optional[aioredis.Redis] = None
        self.published = 0
        self.failed = 0

    async def connect(self) -> None:
        """Establish Redis connection."""
        client = aioredis.from_url(
            self.redis_url,
            decode_responses=True,
            socket_timeout=10,
            socket_connect_timeout=10,
        )
        try:
            await client.ping()
        except RedisError:
            await client.aclose()
            raise
        self._client = client
        logger.info("Connected to Redis", stream=self.stream_key)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "QueueProducer":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    async def publish(self, message: ReleaseMessage | Dict[str, Any]) -> str:
        """
        Append one message to the stream.

        Returns:
            The stream entry id

        Raises:
            RedisError: transport failure; not retried here
        """
        body = message.to_payload() if isinstance(message, ReleaseMessage) else message
        try:
            if self._client is None:
                await self.connect()
            entry_id = await self._client.xadd(  # type: ignore[union-attr]
                self.stream_key,
                {"data": json.dumps(body)},
                maxlen=self.max_stream_len,
                approximate=True,
            )
        except RedisError:
            self.failed += 1
            raise

        self.published += 1
        logger.debug("release_published", entry_id=entry_id, repo=body.get("repoName"), tag=body.get("tagName"))
        return entry_id

    def get_stats(self) -> Dict[str, Any]:
        """Get producer statistics."""
        return {
            "stream": self.stream_key,
            "published": self.published,
            "failed": self.failed,
            "connected": self._client is not None,
        }
