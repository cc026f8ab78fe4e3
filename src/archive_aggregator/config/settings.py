"""Process-wide settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration. Every
variable is prefixed with ``ARCHIVE_AGGREGATOR_`` and may also be supplied
through a ``.env`` file.

Usage::

    from archive_aggregator.config.settings import get_settings

    settings = get_settings()
    defaults = settings.default_request_options()

Settings are read once per process and cached. Call :func:`reset_settings`
after changing the environment (tests do this) to have them re-read.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from archive_aggregator.core.models import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TTL_SECONDS,
)


class Settings(BaseSettings):
    """Configuration backed by environment variables and an optional .env file.

    Every field has a default, so an empty environment yields a fully usable
    configuration (in-memory cache, three concurrent providers).
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVE_AGGREGATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    cache_enabled: bool = True
    """Cache provider responses by default. Per-call ``cache=False`` still wins."""

    cache_ttl_seconds: float = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    """Lifetime of a cached provider response. Defaults to seven days."""

    cache_prefix: str = "archive-aggregator"
    """Namespace prepended to every cache key."""

    redis_url: Optional[str] = None
    """When set, responses are cached in Redis instead of process memory."""

    # ------------------------------------------------------------------
    # Performance
    # ------------------------------------------------------------------

    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    """Maximum number of providers queried at the same time."""

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    """Chunk size when fanning out to more providers than ``concurrency``."""

    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=0)
    """Per-request HTTP timeout applied by the providers."""

    retries: int = Field(default=DEFAULT_RETRIES, ge=0)
    """Retry attempts for transient upstream failures (429, 5xx, network)."""

    # ------------------------------------------------------------------
    # HTTP / providers
    # ------------------------------------------------------------------

    user_agent: str = "archive-aggregator/1.0 (+snapshot listing; research use)"
    """User-Agent header sent to every archive service."""

    permacc_api_key: Optional[str] = None
    """Perma.cc API key. Perma.cc requests fail without one."""

    def default_request_options(self) -> dict[str, Any]:
        """Return the process-wide layer for :func:`~archive_aggregator.core.options.merge_options`."""
        return {
            "cache": self.cache_enabled,
            "ttl": self.cache_ttl_seconds,
            "concurrency": self.concurrency,
            "batch_size": self.batch_size,
            "timeout": self.timeout_seconds,
            "retries": self.retries,
        }


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton.

    Returns:
        Settings: The validated settings object.
    """
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings so the next :func:`get_settings` re-reads the environment."""
    get_settings.cache_clear()
