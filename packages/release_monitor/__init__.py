"""
Release Monitor Package.

Detects new releases and tags of upstream GitHub repositories and forwards
them to the notifier queue.

Features:
- Per-repository Atom tag feeds with bounded retries and a per-cycle quota
- Global events polling with time-sliced token rotation
- Duplicate suppression over a bounded window of delivered events
- Redis Streams publishing
- APScheduler loop for 24/7 operation

Targets:
- Zero upstream rate limit violations across the token pool
- No event published twice within the dedup window
"""

__version__ = "1.0.0"
