"""
Global Events Monitor.

One polling iteration against the global activity feed: pick the token for
this time slot, fetch and merge pages, keep release/tag events not seen
recently, publish them fire-and-forget and remember their ids.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Dict, List, Optional, Protocol, Set

from pydantic import ValidationError

from core.logging import get_logger, log_context
from packages.shared.types import GlobalEvent, ReleaseMessage

from .client import GlobalEventsClient
from .tokens import AccessTokenRotation
from .window import SeenEventWindow

logger = get_logger("events")

TokenSource = Callable[[], Awaitable[Sequence[str]]]


class Publisher(Protocol):
    async def publish(self, message: ReleaseMessage) -> Any: ...


def build_message(event: Dict[str, Any]) -> ReleaseMessage:
    """Downstream message for a raw release or tag-creation event."""
    return ReleaseMessage.from_event(GlobalEvent.from_payload(event))


class GlobalEventsMonitor:
    """
    Release detection over the global events feed.

    Example:
        monitor = GlobalEventsMonitor(events_client, store.load_access_tokens, producer)
        await monitor.validate_tokens()
        published = await monitor.run_iteration()
    """

    def __init__(
        self,
        events_client: GlobalEventsClient,
        token_source: TokenSource,
        publisher: Publisher,
        window: Optional[SeenEventWindow] = None,
        cycle_seconds: float = 3600,
        interval_seconds: float = 1,
        clock: Callable[[], float] = time.time,
    ):
        self.events_client = events_client
        self.token_source = token_source
        self.publisher = publisher
        self.window = window if window is not None else SeenEventWindow()
        self.cycle_seconds = cycle_seconds
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._pending: Set[asyncio.Task] = set()
        self.iterations = 0
        self.errors = 0

    def now_ms(self) -> float:
        return self._clock() * 1000

    async def rotation(self) -> AccessTokenRotation:
        """Load tokens and build this iteration's rotation; fails fast on none."""
        tokens = await self.token_source()
        return AccessTokenRotation(tokens, self.cycle_seconds, self.interval_seconds)

    async def validate_tokens(self) -> None:
        """Raise NoAccessTokensError at startup rather than on every poll."""
        await self.rotation()

    async def run_iteration(self) -> List[ReleaseMessage]:
        """Run one poll and return the messages handed to the publisher."""
        self.iterations += 1
        rotation = await self.rotation()
        index = rotation.index_at(self.now_ms())

        with log_context(iteration=self.iterations, token_index=index):
            events = await self.events_client.fetch_events(rotation.tokens[index])
            fresh = [event for event in events if int(event["id"]) not in self.window]

            messages = []
            for event in fresh:
                event_id = int(event["id"])
                try:
                    message = build_message(event)
                except (ValidationError, AttributeError, TypeError) as e:
                    # Remembered anyway so a malformed event is reported once.
                    logger.warning("event_malformed", event_id=event_id, error=str(e))
                    self.window.push(event_id)
                    continue
                self._publish(message)
                self.window.push(event_id)
                messages.append(message)

            if messages:
                logger.info("events_published", count=len(messages), candidates=len(events))
        return messages

    async def safe_iteration(self) -> List[ReleaseMessage]:
        """Run one poll; any failure is logged and swallowed."""
        try:
            return await self.run_iteration()
        except Exception as e:  # noqa: BLE001
            self.errors += 1
            logger.exception("events_iteration_failed", error=str(e), error_type=type(e).__name__)
            return []

    def _publish(self, message: ReleaseMessage) -> None:
        task = asyncio.create_task(self.publisher.publish(message))
        self._pending.add(task)
        task.add_done_callback(lambda t, m=message: self._on_published(t, m))

    def _on_published(self, task: asyncio.Task, message: ReleaseMessage) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "queue_publish_failed",
                message=message.to_payload(),
                error=str(error),
                error_type=type(error).__name__,
            )

    @property
    def pending_publishes(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for outstanding publishes; used on shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
