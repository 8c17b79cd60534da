"""
Shared Enumerations.

Defines enums used across all packages for type safety and consistency.
"""

from enum import Enum


class FetchErrorKind(str, Enum):
    """Classification of an upstream fetch failure."""
    UNKNOWN = "unknown"
    BAD_REQUEST = "bad_request"
    BAD_RESPONSE = "bad_response"
    NO_ENTRIES = "no_entries"


class EventType(str, Enum):
    """Global activity feed event category relevant to release detection."""
    RELEASE = "ReleaseEvent"
    TAG_CREATE = "CreateEvent"
    OTHER = "Other"
