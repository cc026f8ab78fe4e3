"""The :class:`Archive` facade: one query, many archive providers.

Example::

    from archive_aggregator import Archive, providers

    archive = Archive(providers.all(), {"limit": 50})
    result = await archive.fetch_snapshots("example.com")
    pages = await archive.fetch_pages("example.com")   # raises on failure

Providers may be handed over as instances or as awaitables producing
instances (``providers.wayback_async()``). Awaitables are resolved once, on
first use, by a single shared task; later calls reuse the resolved list.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections.abc import Awaitable, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

import structlog

from archive_aggregator.config.settings import Settings, get_settings
from archive_aggregator.core.combiner import combine_results
from archive_aggregator.core.exceptions import ArchiveFetchError
from archive_aggregator.core.fetcher import fetch_with_cache
from archive_aggregator.core.logging_config import fetch_id_var
from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike, merge_options
from archive_aggregator.core.parallel import run_bounded
from archive_aggregator.providers.base import SupportsFetchSnapshots, is_archive_provider
from archive_aggregator.storage.cache import StorageConfig, get_storage_config

if TYPE_CHECKING:
    from archive_aggregator.providers.base import ArchiveProvider

logger = structlog.get_logger(__name__)

NO_PROVIDERS_ERROR: str = "No archive providers registered"

ProviderLike = Union["ArchiveProvider", SupportsFetchSnapshots, Awaitable[Any]]


class _RegistryState(str, Enum):
    """Lifecycle of an archive's provider list.

    Attributes:
        PENDING: At least one registered entry is still an awaitable.
        RESOLVED: Every entry is a provider instance.
    """

    PENDING = "pending"
    RESOLVED = "resolved"


def _as_entries(providers: ProviderLike | Iterable[ProviderLike] | None) -> list[ProviderLike]:
    if providers is None:
        return []
    if is_archive_provider(providers) or inspect.isawaitable(providers):
        return [providers]
    return list(providers)  # type: ignore[arg-type]


class Archive:
    """Fan a snapshot query out to registered providers and merge the answers.

    Args:
        providers: A provider, an awaitable provider, or an iterable of
            either. Order is kept and decides tie-breaking when pages share
            a timestamp.
        options: Instance-level options, layered between the process
            defaults and per-call options.
        storage: Cache configuration. Defaults to the active configuration
            at construction time.
        settings: Settings supplying process defaults. Defaults to
            :func:`~archive_aggregator.config.settings.get_settings`.
    """

    def __init__(
        self,
        providers: ProviderLike | Iterable[ProviderLike] | None = None,
        options: OptionsLike = None,
        *,
        storage: StorageConfig | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._storage = storage if storage is not None else get_storage_config()
        self._options = options
        self._pending: list[ProviderLike] = _as_entries(providers)
        self._resolved: list[ArchiveProvider] = []
        self._state = _RegistryState.PENDING if self._pending else _RegistryState.RESOLVED
        self._resolution: asyncio.Task[None] | None = None

    @property
    def storage(self) -> StorageConfig:
        """Cache configuration used by this archive."""
        return self._storage

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    async def _resolve_pending(self) -> None:
        try:
            while self._pending:
                entry = self._pending.pop(0)
                provider = await entry if inspect.isawaitable(entry) else entry
                if not is_archive_provider(provider):
                    raise TypeError(
                        f"{provider!r} is not an archive provider "
                        "(needs a name and an async fetch_snapshots)"
                    )
                self._resolved.append(provider)  # type: ignore[arg-type]
            self._state = _RegistryState.RESOLVED
        finally:
            self._resolution = None

    async def _ensure_resolved(self) -> None:
        while self._state is _RegistryState.PENDING:
            if self._resolution is None:
                self._resolution = asyncio.ensure_future(self._resolve_pending())
            await asyncio.shield(self._resolution)

    async def providers(self) -> list[ArchiveProvider]:
        """Return the resolved providers in registration order (a copy)."""
        await self._ensure_resolved()
        return list(self._resolved)

    async def register_provider(self, provider: ProviderLike) -> Archive:
        """Append a provider (or an awaitable of one) to the registry.

        Returns:
            This archive, for chaining.
        """
        self._pending.append(provider)
        self._state = _RegistryState.PENDING
        await self._ensure_resolved()
        return self

    async def register_providers(self, providers: Iterable[ProviderLike]) -> Archive:
        """Append several providers, keeping their order.

        Returns:
            This archive, for chaining.
        """
        self._pending.extend(providers)
        if self._pending:
            self._state = _RegistryState.PENDING
        await self._ensure_resolved()
        return self

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        """List archived snapshots of *domain* across all providers.

        Provider failures never raise; they show up as ``meta["errors"]``
        on a successful result, or as ``error`` when every provider failed.

        Args:
            domain: Domain or URL to look up.
            options: Per-call options, overriding instance options.

        Returns:
            The single provider's result when exactly one is registered,
            otherwise the combined result.
        """
        token = fetch_id_var.set(uuid.uuid4().hex[:12])
        try:
            registered = await self.providers()
            resolved = merge_options(
                self._settings.default_request_options()
                | {"cache": self._storage.cache, "ttl": self._storage.ttl},
                self._options,
                options,
            )

            if len(registered) == 1:
                result = await fetch_with_cache(registered[0], domain, resolved, self._storage)
            elif not registered:
                result = FetchResult(
                    success=False,
                    error=NO_PROVIDERS_ERROR,
                    meta={"source": "multiple", "provider": "", "providers": [], "provider_count": 0},
                )
            else:

                async def _fetch_one(provider: ArchiveProvider) -> FetchResult:
                    return await fetch_with_cache(provider, domain, resolved, self._storage)

                results = await run_bounded(
                    registered,
                    _fetch_one,
                    concurrency=resolved.concurrency,
                    batch_size=resolved.batch_size,
                )
                result = combine_results(results, limit=resolved.limit)

            logger.info(
                "archive_fetch_completed",
                domain=domain,
                provider_count=len(registered),
                success=result.success,
                page_count=len(result.pages),
                from_cache=result.from_cache,
                cache=resolved.cache,
                error=result.error,
            )
            return result
        finally:
            fetch_id_var.reset(token)

    async def fetch_pages(self, domain: str, options: OptionsLike = None) -> list[ArchivedPage]:
        """Like :meth:`fetch_snapshots` but return the pages directly.

        Raises:
            ArchiveFetchError: If no provider returned data.
        """
        result = await self.fetch_snapshots(domain, options)
        if not result.success:
            raise ArchiveFetchError(
                result.error or "Failed to fetch archive snapshots",
                errors=list(result.meta.get("errors") or [result.error]),
            )
        return result.pages

    def __repr__(self) -> str:
        return (
            f"<Archive state={self._state.value} "
            f"providers={len(self._resolved) + len(self._pending)}>"
        )
