"""UK Web Archive snapshot listing via its CDX server."""

from __future__ import annotations

import logging
from typing import Any

from archive_aggregator.core.models import FetchResult
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers._cdx import map_cdx_rows, parse_cdx_json
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import normalize_domain
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.registry import register
from archive_aggregator.providers.uk_web_archive.config import (
    UKWA_CDX_URL,
    UKWA_DEFAULT_LIMIT,
    UKWA_FIELDS,
    UKWA_SNAPSHOT_BASE_URL,
)

logger = logging.getLogger(__name__)


@register
class UkWebArchiveProvider(ArchiveProvider):
    """Lists UK Web Archive captures of a domain.

    Accepts the ``filter`` option (CDX filter expression).
    """

    name: str = "UK Web Archive"
    slug: str = "uk-web-archive"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        params: dict[str, Any] = {
            "url": normalize_domain(domain),
            "output": "json",
            "fl": UKWA_FIELDS,
            "limit": str(opts.limit or UKWA_DEFAULT_LIMIT),
        }
        if opts.extra("filter"):
            params["filter"] = opts.extra("filter")

        async with open_client(self._http_client, opts) as client:
            response = await get_with_retries(
                client, UKWA_CDX_URL, provider=self.slug, options=opts, params=params
            )

        rows = parse_cdx_json(response, self.slug)
        pages = map_cdx_rows(rows, UKWA_SNAPSHOT_BASE_URL, self.slug)
        logger.debug("uk-web-archive: %s: %d captures", domain, len(pages))
        return FetchResult.ok(pages, self.slug, query_params=params)
