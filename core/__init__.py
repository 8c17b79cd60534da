"""
Release Monitor Core Library.

This package provides the shared infrastructure for the release monitor:
configuration, structured logging and the Redis-backed tag/token store.

Usage:
    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging, log_event

    # Store
    from core.cache import RedisTagStore
"""

__version__ = "1.0.0"

# Users should import directly from submodules:
#   from core.config import get_settings
#   from core.logging import get_logger
#   from core.cache import RedisTagStore
