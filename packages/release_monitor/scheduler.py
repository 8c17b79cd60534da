"""
Events Scheduler.

APScheduler-based fixed-interval loop for 24/7 global events monitoring.
Each run re-arms a one-shot job so iteration start times are spaced one
interval apart; an overrunning iteration is followed immediately.
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from core.logging import get_logger

from .events.monitor import GlobalEventsMonitor

logger = get_logger("scheduler")


def time_until_next_fetch(start_ms: float, interval_ms: float, now_ms: float) -> float:
    """Delay before the next iteration: never negative, zero on overrun."""
    next_on_schedule = start_ms + interval_ms
    if now_ms > next_on_schedule:
        return 0
    return next_on_schedule - now_ms


class EventsScheduler:
    """
    Self-rescheduling runner for a GlobalEventsMonitor.

    Features:
    - One iteration in flight at a time
    - Re-arms after success and failure alike
    - Statistics tracking
    """

    JOB_NAME = "Global events monitor"

    def __init__(
        self,
        monitor: GlobalEventsMonitor,
        interval_seconds: float = 1,
        clock: Callable[[], float] = time.time,
    ):
        self.monitor = monitor
        self.interval_ms = interval_seconds * 1000
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self._clock = clock
        self._job: Optional[Job] = None
        self._running = False
        self.stats: Dict = {
            "last_run": None,
            "runs": 0,
            "errors": 0,
            "published": 0,
        }

    async def start(self) -> None:
        """Validate credentials, start the scheduler and arm the first run."""
        if self._running:
            return

        await self.monitor.validate_tokens()

        self.scheduler.start()
        self._running = True
        self._arm(0)
        logger.info("Scheduler started", interval_ms=self.interval_ms)

    def stop(self) -> None:
        """Stop the scheduler; the in-flight iteration is not re-armed."""
        if not self._running:
            return

        self._running = False
        self.scheduler.shutdown(wait=False)
        self._job = None
        logger.info("Scheduler stopped")

    def _arm(self, delay_ms: float) -> None:
        run_date = datetime.now(timezone.utc) + timedelta(milliseconds=delay_ms)
        # A fresh job id per run keeps max_instances from counting the
        # iteration that is re-arming itself.
        self._job = self.scheduler.add_job(
            self._run_iteration,
            trigger=DateTrigger(run_date=run_date),
            name=self.JOB_NAME,
            misfire_grace_time=None,
        )

    async def _run_iteration(self) -> None:
        start_ms = self._clock() * 1000
        try:
            messages = await self.monitor.safe_iteration()
            self.stats["published"] += len(messages)
        finally:
            self.stats["runs"] += 1
            self.stats["errors"] = self.monitor.errors
            self.stats["last_run"] = datetime.now(timezone.utc).isoformat()
            if self._running:
                self._arm(time_until_next_fetch(start_ms, self.interval_ms, self._clock() * 1000))

    def get_stats(self) -> Dict:
        """Get scheduler statistics."""
        next_run = getattr(self._job, "next_run_time", None) if self._job else None
        return {
            "running": self._running,
            "monitor": dict(self.stats),
            "pending_publishes": self.monitor.pending_publishes,
            "window_size": len(self.monitor.window),
            "next_run": next_run.isoformat() if next_run else None,
        }


async def run_events_monitor():
    """
    Main entry point for continuous events monitoring.

    Sets up the scheduler and runs until interrupted.
    """
    from core.cache import RedisTagStore
    from core.config import get_settings
    from core.logging import configure_logging

    from .atom.client import close_connections, get_feed_client
    from .events.client import GlobalEventsClient
    from .events.window import SeenEventWindow
    from .queue import QueueProducer

    settings = get_settings()
    configure_logging(settings.log_level)

    store = RedisTagStore()
    producer = QueueProducer()
    events_client = GlobalEventsClient(
        get_feed_client(),
        api_url=settings.github_api_url,
        pages=settings.events_pages,
        per_page=settings.events_per_page,
        timeout_ms=settings.events_fetch_timeout_ms,
    )
    monitor = GlobalEventsMonitor(
        events_client,
        store.load_access_tokens,
        producer,
        window=SeenEventWindow(settings.track_events_for_duplicates),
        cycle_seconds=settings.events_monitoring_cycle,
        interval_seconds=settings.events_monitoring_interval,
    )
    scheduler = EventsScheduler(monitor, settings.events_monitoring_interval)
    await scheduler.start()

    try:
        # Run forever
        while True:
            await asyncio.sleep(60)
            logger.info("Stats", **scheduler.get_stats())
    except asyncio.CancelledError:
        scheduler.stop()
        await monitor.drain()
        await close_connections()
        await producer.disconnect()
        await store.close()
        logger.info("Monitoring stopped")


if __name__ == "__main__":
    asyncio.run(run_events_monitor())
