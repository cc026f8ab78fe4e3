"""In-process cache store.

Entries live in a plain dict together with their expiry on a monotonic
clock. Expired entries are dropped lazily on access. No method awaits
while touching the dict, so concurrent tasks on one event loop never
observe a half-applied update.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from archive_aggregator.storage.base import CacheStore


class MemoryStore(CacheStore):
    """Dict-backed :class:`CacheStore` with lazy TTL expiry.

    Args:
        clock: Monotonic time source in seconds. Injected by tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]:
            del self._entries[key]

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl: float) -> None:
        self._entries[key] = (value, self._clock() + ttl)

    async def clear(self, prefix: str | None = None) -> None:
        if prefix is None:
            self._entries.clear()
            return
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    async def list_keys(self) -> list[str]:
        self._purge_expired()
        return list(self._entries)

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)
