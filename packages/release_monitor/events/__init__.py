"""
Events Module.

Release detection over the global activity feed:
- Concurrent page fetching with per-page failure containment
- Merge, sort and dedup of pages; release/tag filtering
- Time-sliced access token rotation
- Bounded window suppressing recently delivered events
"""

from .client import GlobalEventsClient, events_valid, is_release_event, merge_pages
from .monitor import GlobalEventsMonitor, build_message
from .tokens import AccessTokenRotation, NoAccessTokensError
from .window import SeenEventWindow

__all__ = [
    "GlobalEventsClient",
    "GlobalEventsMonitor",
    "AccessTokenRotation",
    "NoAccessTokensError",
    "SeenEventWindow",
    "build_message",
    "events_valid",
    "is_release_event",
    "merge_pages",
]
