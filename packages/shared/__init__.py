"""
Shared Package.

Contains types and enums shared across the tag fetcher, the events
monitor and the queue contract read by the notifier.

Usage:
    from packages.shared import RepoGroup, TagEntry
    from packages.shared.enums import FetchErrorKind
"""

from packages.shared.types import (
    GlobalEvent,
    ReleaseMessage,
    RepoGroup,
    RepoGroupWithTags,
    TagEntry,
    UserId,
)
from packages.shared.enums import (
    EventType,
    FetchErrorKind,
)

__all__ = [
    # Types
    "GlobalEvent",
    "ReleaseMessage",
    "RepoGroup",
    "RepoGroupWithTags",
    "TagEntry",
    "UserId",
    # Enums
    "EventType",
    "FetchErrorKind",
]
