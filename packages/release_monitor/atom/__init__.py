"""
Atom Module.

Provides the per-repository tag fetch path:
- Async feed client with keep-alive pooling and status classification
- Regex-based Atom entry parsing
- Bounded retry policy with fixed backoff
- Aggregated error reporting
"""

# Use lazy imports to avoid requiring aiohttp at import time
def __getattr__(name):
    if name in ("FeedClient", "get_feed_client", "close_connections"):
        from . import client
        return getattr(client, name)
    elif name in ("FetchError", "FetchErrorTracker", "classify"):
        from . import errors
        return getattr(errors, name)
    elif name in ("parse_atom", "tags_url"):
        from . import parser
        return getattr(parser, name)
    elif name in ("RetryPolicy", "AttemptCounter"):
        from . import retry
        return getattr(retry, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "FeedClient",
    "get_feed_client",
    "close_connections",
    "FetchError",
    "FetchErrorTracker",
    "classify",
    "parse_atom",
    "tags_url",
    "RetryPolicy",
    "AttemptCounter",
]
