"""
Retry Policy.

Bounded retry loop around FeedClient + parse_atom with a fixed wait between
attempts. Permanent failures (upstream 4xx) stop immediately.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from core.config import get_settings
from core.constants import FETCH_ATTEMPTS, FETCH_ATTEMPTS_INTERVAL_MS, FETCH_TIMEOUT_MS, GITHUB_HOST
from core.logging import LogSink, get_logger, log_event
from packages.shared.enums import FetchErrorKind
from packages.shared.types import TagEntry

from .client import FeedClient, get_feed_client
from .errors import FetchError
from .parser import parse_atom, tags_url

logger = get_logger("atom")


class AttemptCounter:
    """
    Process-scoped count of fetch attempts, for operational metrics.

    Disabled until ``enable()``; while disabled, ``record`` is a no-op.
    """

    def __init__(self):
        self.enabled = False
        self.total = 0

    def enable(self) -> None:
        """Start counting from zero."""
        self.enabled = True
        self.total = 0

    def disable(self) -> None:
        self.enabled = False

    def reset(self) -> None:
        self.total = 0

    def record(self, attempts: int) -> None:
        if self.enabled:
            self.total += attempts

    def log_total(self, sink: LogSink = log_event) -> None:
        """Emit a totalRequests record if anything was counted."""
        if self.total:
            sink("totalRequests", count=self.total)


class RetryPolicy:
    """
    Fetch and parse an Atom feed with bounded retries.

    Example:
        policy = RetryPolicy(client, attempts=3, interval_ms=60000)
        tags = await policy.fetch("https://github.com/owner/repo/tags.atom")
    """

    def __init__(
        self,
        client: Optional[FeedClient] = None,
        attempts: int = FETCH_ATTEMPTS,
        interval_ms: int = FETCH_ATTEMPTS_INTERVAL_MS,
        timeout_ms: int = FETCH_TIMEOUT_MS,
        empty_is_failure: bool = False,
        counter: Optional[AttemptCounter] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.client = client or get_feed_client()
        self.attempts = attempts
        self.interval_ms = interval_ms
        self.timeout_ms = timeout_ms
        self.empty_is_failure = empty_is_failure
        self.counter = counter
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings=None, **kwargs) -> "RetryPolicy":
        """Build a policy from FETCH_ATTEMPTS, FETCH_ATTEMPTS_INTERVAL_MS and FETCH_TIMEOUT_MS."""
        settings = settings or get_settings()
        kwargs.setdefault("attempts", settings.fetch_attempts)
        kwargs.setdefault("interval_ms", settings.fetch_attempts_interval_ms)
        kwargs.setdefault("timeout_ms", settings.fetch_timeout_ms)
        return cls(**kwargs)

    async def fetch(self, url: str, include_raw_entry: bool = False) -> List[TagEntry]:
        """
        Fetch ``url`` and parse its entries.

        Raises:
            FetchError: the last error once attempts are exhausted, or the
                first BAD_REQUEST error
        """
        error: FetchError = FetchError(FetchErrorKind.UNKNOWN)
        attempt = 0
        try:
            while attempt < self.attempts:
                attempt += 1
                try:
                    xml = await self.client.fetch_text(url, self.timeout_ms)
                    tags = parse_atom(xml, include_raw_entry)
                    if not tags and self.empty_is_failure:
                        raise FetchError(FetchErrorKind.NO_ENTRIES)
                    return tags
                except FetchError as e:
                    error = e
                    logger.info("fetch_atom_error", url=url, error=str(e), attempts=attempt)
                    if not e.retryable:
                        break
                    if attempt < self.attempts:
                        await self._sleep(self.interval_ms / 1000)
        finally:
            if self.counter is not None:
                self.counter.record(attempt)
        raise error

    async def fetch_tags(self, repo: str, host: str = GITHUB_HOST) -> List[TagEntry]:
        """Fetch the tag list of ``repo`` ("owner/name") without raw entries."""
        return await self.fetch(tags_url(repo, host), False)
