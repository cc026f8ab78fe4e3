"""WebCite archive lookup."""

from __future__ import annotations

import logging
from urllib.parse import quote

from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.core.timestamps import utc_now_iso
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import normalize_domain
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.registry import register
from archive_aggregator.providers.webcite.config import (
    WEBCITE_HEADERS,
    WEBCITE_NOT_FOUND_MARKER,
    WEBCITE_QUERY_URL,
)

logger = logging.getLogger(__name__)


@register
class WebCiteProvider(ArchiveProvider):
    """Reports whether WebCite holds an archive of a URL.

    At most one page is returned. WebCite does not expose capture times,
    so its timestamp is the time of the lookup.
    """

    name: str = "WebCite"
    slug: str = "webcite"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        clean_domain = normalize_domain(domain, append_wildcard=False)
        params = {"url": clean_domain}

        async with open_client(self._http_client, opts, headers=WEBCITE_HEADERS) as client:
            response = await get_with_retries(
                client,
                WEBCITE_QUERY_URL,
                provider=self.slug,
                options=opts,
                params=params,
                headers=WEBCITE_HEADERS,
            )

        body = response.text
        available = bool(body.strip()) and WEBCITE_NOT_FOUND_MARKER not in body
        pages: list[ArchivedPage] = []
        if available:
            pages.append(
                ArchivedPage(
                    url=clean_domain,
                    timestamp=utc_now_iso(),
                    snapshot=f"{WEBCITE_QUERY_URL}?url={quote(clean_domain, safe='')}",
                    meta={"request_id": "webcite-archive", "provider": self.slug},
                )
            )

        logger.debug("webcite: %s available=%s", clean_domain, available)
        return FetchResult.ok(
            pages,
            self.slug,
            domain=clean_domain,
            empty=not pages,
            query_params=params,
            is_available=available,
        )
