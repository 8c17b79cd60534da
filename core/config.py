"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()

For constants, import from core.constants:
    from core.constants import TAG_ENTRY_REGEXP, EVENT_TYPE_RELEASE
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Release monitor settings loaded from environment variables and .env file.

    Required for the events monitor:
        - GITHUB_ACCESS_TOKENS (comma-separated) or a populated token list in Redis
        - REDIS_URL (publishing and tag cache)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Release Monitor"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Upstream hosts
    github_host: str = Field(default="github.com", validation_alias="GITHUB_HOST")
    github_api_url: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_URL")
    github_access_tokens: Optional[str] = Field(default=None, validation_alias="GITHUB_ACCESS_TOKENS")

    # Atom feed fetching
    fetch_attempts: int = Field(default=3, ge=1, validation_alias="FETCH_ATTEMPTS")
    fetch_attempts_interval_ms: int = Field(default=60000, ge=0, validation_alias="FETCH_ATTEMPTS_INTERVAL_MS")
    fetch_timeout_ms: int = Field(default=10000, gt=0, validation_alias="FETCH_TIMEOUT_MS")
    keep_alive_ms: int = Field(default=1000, ge=0, validation_alias="KEEP_ALIVE_MS")
    max_tags_to_fetch: int = Field(default=500, ge=0, validation_alias="MAX_TAGS_TO_FETCH")

    # Global events monitoring
    events_monitoring_interval: float = Field(default=1, gt=0, validation_alias="EVENTS_MONITORING_INTERVAL")
    events_monitoring_cycle: float = Field(default=3600, gt=0, validation_alias="EVENTS_MONITORING_CYCLE")
    events_per_page: int = Field(default=100, ge=1, le=100, validation_alias="EVENTS_PER_PAGE")
    events_pages: int = Field(default=3, ge=1, validation_alias="EVENTS_PAGES")
    events_fetch_timeout_ms: int = Field(default=5000, gt=0, validation_alias="EVENTS_FETCH_TIMEOUT_MS")
    track_events_for_duplicates: int = Field(default=200, ge=1, validation_alias="TRACK_EVENTS_FOR_DUPLICATES")

    # Redis
    redis_url: Optional[str] = Field(default=None, validation_alias="REDIS_URL")
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, validation_alias="REDIS_PASSWORD")
    releases_stream_key: str = Field(default="releases:detected", validation_alias="RELEASES_STREAM_KEY")

    @property
    def redis_connection_url(self) -> str:
        """Redis URL, either explicit or constructed from components."""
        if self.redis_url:
            return self.redis_url
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL must be a standard logging level (got {v!r})")
        return level

    @model_validator(mode="after")
    def validate_cycle(self) -> "Settings":
        # Token rotation divides the cycle into interval-long slots.
        if self.events_monitoring_cycle < self.events_monitoring_interval:
            raise ValueError(
                "EVENTS_MONITORING_CYCLE must be at least EVENTS_MONITORING_INTERVAL "
                f"(got {self.events_monitoring_cycle} < {self.events_monitoring_interval})"
            )
        return self

    @property
    def access_tokens_list(self) -> List[str]:
        """Parse access tokens from comma-separated string."""
        if not self.github_access_tokens:
            return []
        return [token.strip() for token in self.github_access_tokens.split(",") if token.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
