"""
Redis-backed tag and token store.

Provides a lazily connected async Redis client with:
- Connection pooling shared by every lookup
- Batched best-known-tag lookups for repositories over the fetch quota
- Access token loading for the events monitor
- Graceful degradation when Redis is unavailable
"""

from collections.abc import Sequence
from typing import Dict, List, Optional

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from core.cache.cache_keys import CacheKeys
from core.config import get_settings
from core.logging import get_logger

logger = get_logger("cache")


class RedisTagStore:
    """
    Key-value lookups for previously-seen tags and access tokens.

    Reads only: the notifier owns writes to these keys, so lookups are
    idempotent from the monitor's point of view.

    Usage:
        store = RedisTagStore()
        tags = await store.lookup_tags(repo_groups)  # {"owner/name": "v1.2.3"}
        tokens = await store.load_access_tokens()
        await store.close()
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        tags_key: str = CacheKeys.LATEST_TAGS,
        tokens_key: str = CacheKeys.ACCESS_TOKENS,
    ):
        self.redis_url = redis_url
        self.tags_key = tags_key
        self.tokens_key = tokens_key
        self._pool: Optional[aioredis.ConnectionPool] = None

    @property
    def client(self) -> aioredis.Redis:
        """Get a client bound to the shared pool, creating the pool on first use."""
        if self._pool is None:
            url = self.redis_url or get_settings().redis_connection_url
            self._pool = aioredis.ConnectionPool.from_url(
                url,
                max_connections=10,
                socket_timeout=5,
                socket_connect_timeout=5,
                decode_responses=True,
            )
        return aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Release pooled connections. Safe to call repeatedly."""
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    async def lookup_tags(self, repo_groups: Sequence) -> Dict[str, str]:
        """
        Get the best-known tag name for each repository in one round trip.

        Args:
            repo_groups: RepoGroup-like objects with a ``repo`` attribute

        Returns:
            Mapping of repo to tag name; repos without a cached tag are absent
        """
        repos = [group.repo for group in repo_groups]
        if not repos:
            return {}

        try:
            values = await self.client.hmget(self.tags_key, repos)
        except (ConnectionError, TimeoutError) as e:
            logger.warning("tag_cache_unavailable", error=str(e), repos=len(repos))
            return {}
        except RedisError as e:
            logger.warning("tag_cache_error", error=str(e), repos=len(repos))
            return {}

        return {repo: value for repo, value in zip(repos, values) if value}

    async def load_access_tokens(self) -> List[str]:
        """
        Load upstream access tokens.

        GITHUB_ACCESS_TOKENS takes precedence; otherwise the Redis token list
        is read. An empty result is returned as-is and rejected by the caller.
        """
        configured = get_settings().access_tokens_list
        if configured:
            return configured

        try:
            tokens = await self.client.lrange(self.tokens_key, 0, -1)
        except (ConnectionError, TimeoutError) as e:
            logger.warning("token_store_unavailable", error=str(e))
            return []
        except RedisError as e:
            logger.warning("token_store_error", error=str(e))
            return []

        return [token for token in tokens if token]
