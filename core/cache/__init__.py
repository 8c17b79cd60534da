"""
Redis Store Layer.

Provides Redis-based lookups with connection pooling for:
- Best-known tag names of repositories served from cache
- Upstream access tokens for the events monitor

Usage:
    from core.cache import RedisTagStore, CacheKeys

    store = RedisTagStore()
    tags = await store.lookup_tags(repo_groups)
"""

from core.cache.cache_keys import CacheKeys
from core.cache.redis_client import RedisTagStore

__all__ = [
    "RedisTagStore",
    "CacheKeys",
]
