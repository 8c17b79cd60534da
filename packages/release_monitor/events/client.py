"""
Global Events Client.

Fetches the first pages of the global activity feed concurrently and
normalizes them into a single newest-first, duplicate-free list.
"""

import asyncio
import math
from numbers import Real
from typing import Any, Dict, List, Optional

from core.constants import (
    EVENT_TYPE_CREATE,
    EVENT_TYPE_RELEASE,
    EVENTS_FETCH_TIMEOUT_MS,
    EVENTS_PAGES,
    EVENTS_PATH,
    EVENTS_PER_PAGE,
    GITHUB_API_URL,
    REF_TYPE_TAG,
)
from core.logging import get_logger

from ..atom.client import FeedClient, get_feed_client
from ..atom.errors import FetchError

logger = get_logger("events")


def _valid_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Real):
        return math.isfinite(value)
    if isinstance(value, str):
        return value.strip().isdecimal()
    return False


def events_valid(events: Any) -> bool:
    """A page is valid only as a list of objects that all carry a numeric id."""
    return isinstance(events, list) and all(
        isinstance(event, dict) and _valid_id(event.get("id")) for event in events
    )


def merge_pages(pages: List[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Concatenate pages, sort newest (highest id) first, keep the first of each id."""
    events = [event for page in pages for event in page]
    events.sort(key=lambda event: int(event["id"]), reverse=True)

    seen = set()
    merged = []
    for event in events:
        event_id = int(event["id"])
        if event_id in seen:
            continue
        seen.add(event_id)
        merged.append(event)
    return merged


def is_release_event(event: Dict[str, Any]) -> bool:
    """Keep releases and tag creations only."""
    if event.get("type") == EVENT_TYPE_RELEASE:
        return True
    return (
        event.get("type") == EVENT_TYPE_CREATE
        and (event.get("payload") or {}).get("ref_type") == REF_TYPE_TAG
    )


class GlobalEventsClient:
    """
    Paginated reader of the global events endpoint.

    Example:
        events_client = GlobalEventsClient(feed_client)
        pages = await events_client.fetch_pages(token)
        events = merge_pages(pages)
    """

    def __init__(
        self,
        feed_client: Optional[FeedClient] = None,
        api_url: str = GITHUB_API_URL,
        pages: int = EVENTS_PAGES,
        per_page: int = EVENTS_PER_PAGE,
        timeout_ms: int = EVENTS_FETCH_TIMEOUT_MS,
    ):
        self.feed_client = feed_client or get_feed_client()
        self.api_url = api_url.rstrip("/")
        self.pages = pages
        self.per_page = per_page
        self.timeout_ms = timeout_ms

    def page_urls(self) -> List[str]:
        return [
            self.api_url + EVENTS_PATH.format(per_page=self.per_page, page=page)
            for page in range(1, self.pages + 1)
        ]

    async def fetch_page(self, url: str, token: str) -> List[Dict[str, Any]]:
        """Fetch one page; failures and malformed pages degrade to an empty page."""
        try:
            events = await self.feed_client.fetch_json(
                url,
                self.timeout_ms,
                headers={"Authorization": f"token {token}"},
            )
        except FetchError as e:
            logger.warning("events_page_failed", url=url, kind=e.kind.value, status=e.status, error=str(e))
            return []

        if not events_valid(events):
            logger.warning("events_page_invalid", url=url)
            return []
        return events

    async def fetch_pages(self, token: str) -> List[List[Dict[str, Any]]]:
        """Fetch every page concurrently."""
        return list(
            await asyncio.gather(*(self.fetch_page(url, token) for url in self.page_urls()))
        )

    async def fetch_events(self, token: str) -> List[Dict[str, Any]]:
        """Fetch, merge and return release/tag events, newest first."""
        return [event for event in merge_pages(await self.fetch_pages(token)) if is_release_event(event)]
