"""Wayback Machine snapshot listing via the CDX server API."""

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
from archive_aggregator.providers.wayback.config import (
    WB_CDX_URL,
    WB_DEFAULT_COLLAPSE,
    WB_DEFAULT_LIMIT,
    WB_FIELDS,
    WB_SNAPSHOT_BASE_URL,
)

logger = logging.getLogger(__name__)


@register
class WaybackProvider(ArchiveProvider):
    """Lists Internet Archive captures of a domain.

    Provider-specific options:

    - ``collapse``: CDX collapse rule (default ``"timestamp:4"``).
    - ``filter``: CDX filter expression, e.g. ``"statuscode:200"``.
    """

    name: str = "Internet Archive Wayback Machine"
    slug: str = "wayback"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        params: dict[str, Any] = {
            "url": normalize_domain(domain),
            "output": "json",
            "fl": WB_FIELDS,
            "collapse": opts.extra("collapse", WB_DEFAULT_COLLAPSE),
            "limit": str(opts.limit or WB_DEFAULT_LIMIT),
        }
        cdx_filter = opts.extra("filter")
        if cdx_filter:
            params["filter"] = cdx_filter

        async with open_client(self._http_client, opts) as client:
            response = await get_with_retries(
                client, WB_CDX_URL, provider=self.slug, options=opts, params=params
            )

        pages = map_cdx_rows(parse_cdx_json(response, self.slug), WB_SNAPSHOT_BASE_URL, self.slug)
        logger.debug("wayback: %s: %d captures", domain, len(pages))
        return FetchResult.ok(pages, self.slug, query_params=params)
