"""Response caching on top of a :class:`~archive_aggregator.storage.base.CacheStore`.

Cache configuration is an explicit :class:`StorageConfig` value handed to
:class:`~archive_aggregator.core.archive.Archive` and to
:func:`~archive_aggregator.core.fetcher.fetch_with_cache`. Call sites that
do not pass one share the *active* configuration:

- :func:`get_storage_config` returns the configuration bound with
  :func:`use_storage_config` in the current context, else the process
  default (built from settings on first use);
- :func:`configure_storage` replaces the process default;
- :func:`reset_storage_config` drops it, so the next call rebuilds it from
  settings.

Cache keys have the shape ``{prefix}:{provider}:{domain}[:{limit}]``. The
limit is part of the key because different limits are different queries.
Cache faults are logged and degrade to "fetch fresh"; they never fail a
request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from archive_aggregator.core.models import DEFAULT_TTL_SECONDS, FetchResult, RequestOptions
from archive_aggregator.storage.base import CacheStore
from archive_aggregator.storage.memory import MemoryStore

if TYPE_CHECKING:
    from archive_aggregator.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_PREFIX: str = "archive-aggregator"


@dataclass(frozen=True)
class StorageConfig:
    """Where and how provider responses are cached.

    Attributes:
        store: Backend holding serialized responses.
        prefix: Namespace prepended to every key.
        ttl: Default entry lifetime in seconds.
        cache: Whether caching is on by default.
    """

    store: CacheStore = field(default_factory=MemoryStore)
    prefix: str = DEFAULT_PREFIX
    ttl: float = DEFAULT_TTL_SECONDS
    cache: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageConfig:
        """Build a configuration from :class:`Settings`.

        Uses Redis when ``redis_url`` is set, process memory otherwise.
        """
        store: CacheStore
        if settings.redis_url:
            from archive_aggregator.storage.redis_store import RedisStore  # noqa: PLC0415

            store = RedisStore.from_url(settings.redis_url)
        else:
            store = MemoryStore()
        return cls(
            store=store,
            prefix=settings.cache_prefix,
            ttl=settings.cache_ttl_seconds,
            cache=settings.cache_enabled,
        )


# ---------------------------------------------------------------------------
# Active configuration
# ---------------------------------------------------------------------------

_default_config: StorageConfig | None = None

_active_config: ContextVar[StorageConfig | None] = ContextVar(
    "archive_aggregator_storage", default=None
)


def get_storage_config() -> StorageConfig:
    """Return the storage configuration active in the current context."""
    global _default_config  # noqa: PLW0603
    scoped = _active_config.get()
    if scoped is not None:
        return scoped
    if _default_config is None:
        from archive_aggregator.config.settings import get_settings  # noqa: PLC0415

        _default_config = StorageConfig.from_settings(get_settings())
    return _default_config


def configure_storage(
    store: CacheStore | None = None,
    *,
    prefix: str | None = None,
    ttl: float | None = None,
    cache: bool | None = None,
) -> StorageConfig:
    """Replace the process-default storage configuration.

    Fields left as ``None`` keep their current value.

    Returns:
        The new default configuration.
    """
    global _default_config  # noqa: PLW0603
    current = _default_config or get_storage_config()
    changes: dict[str, Any] = {
        name: value
        for name, value in (("store", store), ("prefix", prefix), ("ttl", ttl), ("cache", cache))
        if value is not None
    }
    _default_config = replace(current, **changes)
    return _default_config


def reset_storage_config() -> None:
    """Forget the process default; it is rebuilt from settings on next use."""
    global _default_config  # noqa: PLW0603
    _default_config = None


@contextmanager
def use_storage_config(config: StorageConfig) -> Iterator[StorageConfig]:
    """Bind *config* as the active storage configuration within a block."""
    token = _active_config.set(config)
    try:
        yield config
    finally:
        _active_config.reset(token)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def provider_key(provider: Any) -> str:
    """Return the cache namespace of a provider: its slug, else its name."""
    if isinstance(provider, str):
        return provider
    return getattr(provider, "slug", None) or provider.name


def generate_storage_key(
    provider: Any,
    domain: str,
    limit: int | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """Build the cache key for one provider query.

    Args:
        provider: Provider object (``slug``/``name``) or a slug string.
        domain: Queried domain, used verbatim.
        limit: Result limit; omitted from the key when falsy.
        prefix: Key namespace.

    Returns:
        ``"{prefix}:{provider}:{domain}"`` with ``":{limit}"`` appended when
        a limit is set.
    """
    key = f"{prefix}:{provider_key(provider)}:{domain}"
    return f"{key}:{limit}" if limit else key


# ---------------------------------------------------------------------------
# Read / write
# ---------------------------------------------------------------------------


async def get_stored_response(
    provider: Any,
    domain: str,
    options: RequestOptions,
    storage: StorageConfig | None = None,
) -> FetchResult | None:
    """Return a cached response flagged ``from_cache=True``, or ``None``.

    Returns ``None`` when caching is disabled, on a miss, and on any store
    or deserialization fault.
    """
    if not options.cache:
        return None
    storage = storage or get_storage_config()
    key = generate_storage_key(provider, domain, options.limit, storage.prefix)

    try:
        payload = await storage.store.get(key)
    except Exception as exc:  # noqa: BLE001
        logger.warning("cache: read error for %s: %s", key, exc)
        return None
    if payload is None:
        return None

    try:
        cached = FetchResult.model_validate_json(payload)
    except ValueError as exc:
        logger.warning("cache: discarding corrupt entry %s: %s", key, exc)
        return None
    logger.debug("cache: hit %s", key)
    return cached.model_copy(update={"from_cache": True})


async def store_response(
    provider: Any,
    domain: str,
    result: FetchResult,
    options: RequestOptions,
    storage: StorageConfig | None = None,
) -> None:
    """Cache a successful response under the TTL from *options*.

    Failed responses and calls with caching disabled are not stored. The
    ``from_cache`` flag is stripped before serialization.
    """
    if not options.cache or not result.success:
        return
    storage = storage or get_storage_config()
    key = generate_storage_key(provider, domain, options.limit, storage.prefix)
    ttl = options.ttl if options.ttl and options.ttl > 0 else storage.ttl
    payload = result.model_copy(update={"from_cache": False}).model_dump_json(
        exclude={"from_cache"}
    )

    try:
        await storage.store.set(key, payload, ttl)
    except Exception as exc:  # noqa: BLE001
        logger.warning("cache: write error for %s: %s", key, exc)


async def clear_cache(storage: StorageConfig | None = None) -> None:
    """Remove every cached response under the configured prefix."""
    storage = storage or get_storage_config()
    try:
        await storage.store.clear(f"{storage.prefix}:")
    except Exception as exc:  # noqa: BLE001
        logger.error("cache: failed to clear cache: %s", exc)


async def clear_provider_cache(provider: Any, storage: StorageConfig | None = None) -> None:
    """Remove cached responses of one provider (object or slug)."""
    storage = storage or get_storage_config()
    prefix = f"{storage.prefix}:{provider_key(provider)}:"
    try:
        await storage.store.clear(prefix)
    except Exception as exc:  # noqa: BLE001
        logger.error("cache: failed to clear cache for %s: %s", provider_key(provider), exc)
