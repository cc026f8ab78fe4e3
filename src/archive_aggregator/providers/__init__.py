"""Archive providers and their factory functions.

Every bundled provider can be created eagerly or awaited::

    from archive_aggregator import providers

    wayback = providers.wayback({"limit": 100})
    permacc = await providers.permacc_async({"api_key": "..."})
    archive = Archive(providers.all({"timeout": 15}))

Both forms accept provider ``init_options`` and an optional injected
``http_client``. The awaitable forms can be handed to
:class:`~archive_aggregator.core.archive.Archive` unresolved.
"""

from __future__ import annotations

import httpx

from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers.archive_today.provider import ArchiveTodayProvider
from archive_aggregator.providers.base import ArchiveProvider, SupportsFetchSnapshots
from archive_aggregator.providers.commoncrawl.provider import CommonCrawlProvider
from archive_aggregator.providers.memento_time.provider import MementoTimeProvider
from archive_aggregator.providers.permacc.provider import PermaccProvider
from archive_aggregator.providers.registry import get_provider, list_providers, register
from archive_aggregator.providers.uk_web_archive.provider import UkWebArchiveProvider
from archive_aggregator.providers.wayback.provider import WaybackProvider
from archive_aggregator.providers.webcite.provider import WebCiteProvider

DEFAULT_PROVIDER_SLUGS: tuple[str, ...] = ("wayback", "archive-today", "commoncrawl", "webcite")
"""Providers created by :func:`all`. Perma.cc is left out because it needs
an API key; the UK Web Archive and Memento Time Travel are opt-in."""


def create(
    slug: str,
    options: OptionsLike = None,
    http_client: httpx.AsyncClient | None = None,
) -> ArchiveProvider:
    """Instantiate the registered provider *slug*.

    Raises:
        KeyError: If no provider is registered under *slug*.
    """
    return get_provider(slug)(options, http_client=http_client)


def wayback(options: OptionsLike = None, http_client: httpx.AsyncClient | None = None) -> WaybackProvider:
    return WaybackProvider(options, http_client=http_client)


def archive_today(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> ArchiveTodayProvider:
    return ArchiveTodayProvider(options, http_client=http_client)


def permacc(options: OptionsLike = None, http_client: httpx.AsyncClient | None = None) -> PermaccProvider:
    return PermaccProvider(options, http_client=http_client)


def commoncrawl(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> CommonCrawlProvider:
    return CommonCrawlProvider(options, http_client=http_client)


def uk_web_archive(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> UkWebArchiveProvider:
    return UkWebArchiveProvider(options, http_client=http_client)


def memento_time(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> MementoTimeProvider:
    return MementoTimeProvider(options, http_client=http_client)


def webcite(options: OptionsLike = None, http_client: httpx.AsyncClient | None = None) -> WebCiteProvider:
    return WebCiteProvider(options, http_client=http_client)


def all(  # noqa: A001
    options: OptionsLike = None,
    http_client: httpx.AsyncClient | None = None,
) -> list[ArchiveProvider]:
    """Create every provider in :data:`DEFAULT_PROVIDER_SLUGS`, in that order."""
    return [create(slug, options, http_client) for slug in DEFAULT_PROVIDER_SLUGS]


# ---------------------------------------------------------------------------
# Awaitable variants
# ---------------------------------------------------------------------------


async def wayback_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> WaybackProvider:
    return wayback(options, http_client)


async def archive_today_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> ArchiveTodayProvider:
    return archive_today(options, http_client)


async def permacc_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> PermaccProvider:
    return permacc(options, http_client)


async def commoncrawl_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> CommonCrawlProvider:
    return commoncrawl(options, http_client)


async def uk_web_archive_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> UkWebArchiveProvider:
    return uk_web_archive(options, http_client)


async def memento_time_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> MementoTimeProvider:
    return memento_time(options, http_client)


async def webcite_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> WebCiteProvider:
    return webcite(options, http_client)


async def all_async(
    options: OptionsLike = None, http_client: httpx.AsyncClient | None = None
) -> list[ArchiveProvider]:
    return all(options, http_client)


__all__ = [
    "ArchiveProvider",
    "ArchiveTodayProvider",
    "CommonCrawlProvider",
    "DEFAULT_PROVIDER_SLUGS",
    "MementoTimeProvider",
    "PermaccProvider",
    "SupportsFetchSnapshots",
    "UkWebArchiveProvider",
    "WaybackProvider",
    "WebCiteProvider",
    "all",
    "all_async",
    "archive_today",
    "archive_today_async",
    "commoncrawl",
    "commoncrawl_async",
    "create",
    "get_provider",
    "list_providers",
    "memento_time",
    "memento_time_async",
    "permacc",
    "permacc_async",
    "register",
    "uk_web_archive",
    "uk_web_archive_async",
    "wayback",
    "wayback_async",
    "webcite",
    "webcite_async",
]
