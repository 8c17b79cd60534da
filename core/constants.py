"""
Application constants for the release monitor.

Contains upstream URL shapes, feed patterns and event type names.
Tunable values (intervals, quotas, window sizes) live in core.config.
"""

import re

# =============================================================================
# Upstream Endpoints
# =============================================================================

GITHUB_HOST = "github.com"
GITHUB_API_URL = "https://api.github.com"

TAGS_ATOM_PATH = "/{repo}/tags.atom"
EVENTS_PATH = "/events?per_page={per_page}&page={page}"

USER_AGENT = "ReleaseMonitor/1.0"

# =============================================================================
# Atom Feed Patterns
# =============================================================================

# One <entry>...</entry> fragment, shortest match, across lines.
TAG_ENTRY_REGEXP = re.compile(r"<entry>.*?</entry>", re.DOTALL)

# Everything after the Repository/<id>/ prefix, slashes included, e.g.
# tag:github.com,2008:Repository/12345/release/1.2 -> release/1.2
TAG_ID_REGEXP = re.compile(r"<id>[^<]+Repository/\d+/([^<]+)</id>")

# =============================================================================
# Global Events
# =============================================================================

EVENT_TYPE_RELEASE = "ReleaseEvent"
EVENT_TYPE_CREATE = "CreateEvent"
REF_TYPE_TAG = "tag"

# =============================================================================
# Fetch Defaults
# =============================================================================

FETCH_ATTEMPTS = 3
FETCH_ATTEMPTS_INTERVAL_MS = 60000
FETCH_TIMEOUT_MS = 10000
KEEP_ALIVE_MS = 1000

EVENTS_PAGES = 3
EVENTS_PER_PAGE = 100
EVENTS_FETCH_TIMEOUT_MS = 5000

TOO_MANY_REQUESTS = 429

# Prefix for aggregated tag-fetch error records
FETCH_TAGS_ERRORS_PREFIX = "fetchTagsErrors"
