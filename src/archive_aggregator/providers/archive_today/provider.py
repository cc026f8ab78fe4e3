"""Archive.today snapshot listing via the Memento timemap."""

from __future__ import annotations

import logging

from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import clean_double_slashes, ensure_protocol, normalize_domain
from archive_aggregator.providers.archive_today.config import AT_MEMENTO_PATTERN, AT_TIMEMAP_URL
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.registry import register

logger = logging.getLogger(__name__)


def parse_timemap(text: str, domain: str, provider: str) -> list[ArchivedPage]:
    """Extract pages for *domain* from an Archive.today timemap body.

    Mementos of other URLs are ignored. Trailing slashes are removed from
    both the original URL and the snapshot URL.
    """
    pages: list[ArchivedPage] = []
    for match in AT_MEMENTO_PATTERN.finditer(text):
        snapshot_url, capture_id, original, datetime_attr = match.groups()
        if domain not in original:
            continue
        url = clean_double_slashes(ensure_protocol(original)).rstrip("/")
        pages.append(
            ArchivedPage(
                url=url,
                timestamp=datetime_attr,
                snapshot=snapshot_url.rstrip("/"),
                meta={
                    "hash": capture_id,
                    "raw_date": datetime_attr,
                    "position": len(pages),
                    "provider": provider,
                },
            )
        )
    return pages


@register
class ArchiveTodayProvider(ArchiveProvider):
    """Lists Archive.today captures of a domain."""

    name: str = "Archive.today"
    slug: str = "archive-today"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        clean_domain = normalize_domain(domain, append_wildcard=False)
        full_url = ensure_protocol(clean_domain, scheme="http")

        async with open_client(self._http_client, opts) as client:
            response = await get_with_retries(
                client,
                AT_TIMEMAP_URL.format(url=full_url),
                provider=self.slug,
                options=opts,
                ok_statuses=frozenset({404}),
            )

        pages: list[ArchivedPage] = []
        if response.status_code != 404:
            pages = parse_timemap(response.text, clean_domain, self.slug)
        if opts.limit:
            pages = pages[:opts.limit]

        logger.debug("archive-today: %s: %d captures", domain, len(pages))
        return FetchResult.ok(pages, self.slug, domain=clean_domain, empty=not pages)
