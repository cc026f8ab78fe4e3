"""archive-aggregator: list web-archive snapshots of a domain across many archives.

Quick start::

    from archive_aggregator import Archive, providers

    archive = Archive(providers.all())
    result = await archive.fetch_snapshots("example.com", {"limit": 20})
    for page in result.pages:
        print(page.timestamp, page.snapshot)
"""

from __future__ import annotations

from archive_aggregator import providers
from archive_aggregator.core.archive import Archive
from archive_aggregator.core.combiner import combine_results
from archive_aggregator.core.exceptions import (
    ArchiveAggregatorError,
    ArchiveFetchError,
    CacheError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
)
from archive_aggregator.core.fetcher import fetch_with_cache
from archive_aggregator.core.logging_config import configure_logging
from archive_aggregator.core.models import ArchivedPage, FetchResult, RequestOptions
from archive_aggregator.core.options import merge_options
from archive_aggregator.core.parallel import run_bounded
from archive_aggregator.providers.base import ArchiveProvider, SupportsFetchSnapshots
from archive_aggregator.storage import (
    CacheStore,
    MemoryStore,
    RedisStore,
    StorageConfig,
    clear_cache,
    clear_provider_cache,
    configure_storage,
    get_storage_config,
    reset_storage_config,
    use_storage_config,
)

__version__ = "0.1.0"

__all__ = [
    "Archive",
    "ArchiveAggregatorError",
    "ArchiveFetchError",
    "ArchiveProvider",
    "ArchivedPage",
    "CacheError",
    "CacheStore",
    "FetchResult",
    "MemoryStore",
    "ProviderAuthError",
    "ProviderError",
    "ProviderRateLimitError",
    "RedisStore",
    "RequestOptions",
    "StorageConfig",
    "SupportsFetchSnapshots",
    "clear_cache",
    "clear_provider_cache",
    "combine_results",
    "configure_logging",
    "configure_storage",
    "fetch_with_cache",
    "get_storage_config",
    "merge_options",
    "providers",
    "reset_storage_config",
    "run_bounded",
    "use_storage_config",
]
