"""Redis-backed cache store.

Each operation is a single Redis command (``GET``, ``SET ... PX``) or a
``SCAN`` followed by ``DEL`` for prefix clears, so concurrent fetches
sharing one client never corrupt each other's entries.

Typical usage::

    store = RedisStore.from_url("redis://localhost:6379/0")
    archive = Archive(providers.all(), storage=StorageConfig(store=store))
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from archive_aggregator.core.exceptions import CacheError
from archive_aggregator.storage.base import CacheStore

logger = logging.getLogger(__name__)

_SCAN_COUNT: int = 500
_DELETE_CHUNK: int = 500


class RedisStore(CacheStore):
    """:class:`CacheStore` on top of ``redis.asyncio``.

    Redis errors are re-raised as :class:`CacheError`; the fetcher treats
    those as a cache miss.

    Args:
        redis_client: A ``redis.asyncio.Redis`` created with
            ``decode_responses=True``.
    """

    def __init__(self, redis_client: aioredis.Redis) -> None:
        self.redis_client = redis_client

    @classmethod
    def from_url(cls, redis_url: str) -> RedisStore:
        """Create a store from a Redis connection URL."""
        client: aioredis.Redis = aioredis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        return cls(client)

    async def get(self, key: str) -> str | None:
        try:
            value = await self.redis_client.get(key)
        except RedisError as exc:
            raise CacheError(f"redis GET failed: {exc}", key=key) from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: float) -> None:
        try:
            await self.redis_client.set(key, value, px=max(1, int(ttl * 1000)))
        except RedisError as exc:
            raise CacheError(f"redis SET failed: {exc}", key=key) from exc

    async def _scan(self, match: str) -> list[str]:
        keys: list[str] = []
        async for key in self.redis_client.scan_iter(match=match, count=_SCAN_COUNT):
            keys.append(key.decode("utf-8") if isinstance(key, bytes) else key)
        return keys

    async def clear(self, prefix: str | None = None) -> None:
        try:
            keys = await self._scan(f"{prefix}*" if prefix else "*")
            for start in range(0, len(keys), _DELETE_CHUNK):
                await self.redis_client.delete(*keys[start:start + _DELETE_CHUNK])
        except RedisError as exc:
            raise CacheError(f"redis clear failed: {exc}", key=prefix) from exc
        logger.debug("redis_store: cleared %d keys (prefix=%s)", len(keys), prefix)

    async def list_keys(self) -> list[str]:
        try:
            return await self._scan("*")
        except RedisError as exc:
            raise CacheError(f"redis SCAN failed: {exc}") from exc

    async def aclose(self) -> None:
        """Close the underlying Redis connection pool."""
        await self.redis_client.aclose()
