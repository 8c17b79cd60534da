"""
Cache key management.

Centralized key definitions to:
- Prevent key collisions between the monitor and the notifier
- Document the store layout
"""


class CacheKeys:
    """
    Centralized Redis key definitions.

    Naming convention: {domain}:{entity}

    Examples:
        - tags:latest -> hash of repo ("owner/name") to best-known tag name
        - tokens:access -> list of upstream access tokens
        - releases:detected -> stream of detected release messages
    """

    LATEST_TAGS = "tags:latest"
    ACCESS_TOKENS = "tokens:access"
    RELEASES_STREAM = "releases:detected"
