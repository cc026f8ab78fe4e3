"""Abstract key-value store with TTL semantics.

The orchestration core only ever performs single ``get`` or ``set`` calls
against a store; it never splits a read-modify-write across two awaits.
Implementations must therefore be safe for concurrent use from several
in-flight provider fetches, but need no transactions.

Values are opaque strings: the core serializes
:class:`~archive_aggregator.core.models.FetchResult` to JSON before storing
it and the store never interprets the payload.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheStore(ABC):
    """Async string key-value store with per-entry TTL."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: float) -> None:
        """Store *value* under *key* for *ttl* seconds."""

    @abstractmethod
    async def clear(self, prefix: str | None = None) -> None:
        """Remove every key, or only keys starting with *prefix*."""

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """Return all live keys."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
