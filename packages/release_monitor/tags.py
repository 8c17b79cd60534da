"""
Batch Tag Orchestrator.

Fetches tag lists for a batch of repositories. A shuffled subset up to the
per-cycle quota is fetched live, one repository at a time; the rest are
served from the tag cache in a single lookup.
"""

import random
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import List, Optional

from core.config import get_settings
from core.constants import FETCH_TAGS_ERRORS_PREFIX, GITHUB_HOST
from core.logging import get_logger
from packages.shared.types import RepoGroup, RepoGroupWithTags, TagEntry

from .atom.errors import FetchErrorTracker
from .atom.retry import AttemptCounter, RetryPolicy

logger = get_logger("atom")

CacheLookup = Callable[[Sequence[RepoGroup]], Awaitable[Mapping[str, str]]]


async def fetch_all_tags(
    repo_groups: Sequence[RepoGroup],
    quota: int,
    cache_lookup: CacheLookup,
    retry_policy: RetryPolicy,
    *,
    tracker: Optional[FetchErrorTracker] = None,
    rng: Optional[random.Random] = None,
    host: str = GITHUB_HOST,
) -> List[RepoGroupWithTags]:
    """
    Fetch tags for every repository group.

    Args:
        repo_groups: Repositories with their subscribers
        quota: Maximum number of repositories fetched live this cycle
        cache_lookup: Batched lookup returning {repo: best-known tag name}
        retry_policy: Policy used for each live fetch
        tracker: Error aggregator; a fresh one is used if omitted
        rng: Source of the shuffle, the module-level generator if omitted

    Returns:
        One RepoGroupWithTags per input group: live-fetched groups first (in
        shuffled order), then cache-served ones. Input order is not kept.
    """
    tracker = tracker if tracker is not None else FetchErrorTracker()

    shuffled = list(repo_groups)
    (rng or random).shuffle(shuffled)
    quota = max(quota, 0)
    to_fetch, from_cache = shuffled[:quota], shuffled[quota:]

    result: List[RepoGroupWithTags] = []

    for group in to_fetch:
        try:
            tags = await retry_policy.fetch_tags(group.repo, host)
        except Exception as e:  # noqa: BLE001
            tags = []
            tracker.push(group.repo, e)
        result.append(RepoGroupWithTags(repo=group.repo, users=group.users, tags=tags))

    if from_cache:
        cached = await cache_lookup(from_cache)
        for group in from_cache:
            name = cached.get(group.repo)
            tags = [TagEntry(name=name, raw_entry="")] if name else []
            result.append(RepoGroupWithTags(repo=group.repo, users=group.users, tags=tags))

    logger.info(
        "fetch_all_tags_complete",
        live=len(to_fetch),
        cached=len(from_cache),
        errors=len(tracker),
    )
    tracker.log(FETCH_TAGS_ERRORS_PREFIX)
    return result


async def fetch_tags_with_settings(
    repo_groups: Sequence[RepoGroup],
    store=None,
    counter: Optional[AttemptCounter] = None,
) -> List[RepoGroupWithTags]:
    """
    Run one tag fetch cycle configured from the environment.

    Uses MAX_TAGS_TO_FETCH as the quota, the Redis tag store for
    over-quota repositories and the FETCH_* settings for retries.
    """
    from core.cache import RedisTagStore

    settings = get_settings()
    store = store if store is not None else RedisTagStore()
    return await fetch_all_tags(
        repo_groups,
        settings.max_tags_to_fetch,
        store.lookup_tags,
        RetryPolicy.from_settings(settings, counter=counter),
        host=settings.github_host,
    )
