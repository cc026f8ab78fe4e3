"""Cache stores and response caching helpers."""

from __future__ import annotations

from archive_aggregator.storage.base import CacheStore
from archive_aggregator.storage.cache import (
    StorageConfig,
    clear_cache,
    clear_provider_cache,
    configure_storage,
    generate_storage_key,
    get_storage_config,
    reset_storage_config,
    use_storage_config,
)
from archive_aggregator.storage.memory import MemoryStore
from archive_aggregator.storage.redis_store import RedisStore

__all__ = [
    "CacheStore",
    "MemoryStore",
    "RedisStore",
    "StorageConfig",
    "clear_cache",
    "clear_provider_cache",
    "configure_storage",
    "generate_storage_key",
    "get_storage_config",
    "reset_storage_config",
    "use_storage_config",
]
