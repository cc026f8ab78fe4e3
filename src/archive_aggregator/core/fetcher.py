"""Cache-aware single-provider fetch.

:func:`fetch_with_cache` is the boundary where provider exceptions become
data: whatever a provider raises, the caller receives a failed
:class:`~archive_aggregator.core.models.FetchResult`. Only
``asyncio.CancelledError`` passes through.
"""

from __future__ import annotations

import logging
from typing import Any

from archive_aggregator.config.settings import get_settings
from archive_aggregator.core.models import FetchResult, RequestOptions
from archive_aggregator.core.options import OptionsLike, merge_options
from archive_aggregator.storage.cache import (
    StorageConfig,
    get_stored_response,
    provider_key,
    store_response,
)

logger = logging.getLogger(__name__)


async def fetch_with_cache(
    provider: Any,
    domain: str,
    options: OptionsLike = None,
    storage: StorageConfig | None = None,
) -> FetchResult:
    """List the snapshots one provider holds for *domain*, through the cache.

    Steps:

    1. With caching on, look the query up in *storage*; a hit is returned
       with ``from_cache=True`` and the provider is not called.
    2. Otherwise call ``provider.fetch_snapshots(domain, options)``.
    3. Store successful results under ``options.ttl``.

    The provider's own ``init_options`` are merged underneath *options*, so
    they only fill keys the caller left unset.

    Args:
        provider: An :class:`~archive_aggregator.providers.base.ArchiveProvider`
            or any object with ``name`` and ``fetch_snapshots`` (``slug`` optional).
        domain: Domain or URL pattern to query.
        options: Effective options for this call.
        storage: Cache configuration. Defaults to the active one.

    Returns:
        The provider's result, a cached copy of it, or a failure describing
        the exception the provider raised.
    """
    resolved: RequestOptions = merge_options(
        get_settings().default_request_options(),
        getattr(provider, "init_options", None),
        options,
    )
    slug = provider_key(provider)

    cached = await get_stored_response(provider, domain, resolved, storage)
    if cached is not None:
        return cached

    try:
        result = await provider.fetch_snapshots(domain, resolved)
    except Exception as exc:  # noqa: BLE001
        logger.warning("fetcher: provider %s failed for %s: %s", slug, domain, exc)
        return FetchResult.failure(exc, provider.name, provider=slug)

    await store_response(provider, domain, result, resolved, storage)
    return result
