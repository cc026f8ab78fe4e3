"""Memento Time Travel snapshot listing via the JSON timemap."""

from __future__ import annotations

import logging
from typing import Any

from archive_aggregator.core.exceptions import ProviderError
from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import clean_double_slashes, ensure_protocol, normalize_domain
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.memento_time.config import MT_TIMEMAP_URL
from archive_aggregator.providers.registry import register

logger = logging.getLogger(__name__)


@register
class MementoTimeProvider(ArchiveProvider):
    """Lists mementos of a URL collected by the Time Travel aggregator.

    Each page's ``meta["archive"]`` names the archive that holds the
    memento, when Time Travel reports it.
    """

    name: str = "Memento Time Travel"
    slug: str = "memento-time"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        url = ensure_protocol(normalize_domain(domain, append_wildcard=False))

        async with open_client(self._http_client, opts) as client:
            response = await get_with_retries(
                client,
                MT_TIMEMAP_URL.format(url=url),
                provider=self.slug,
                options=opts,
                ok_statuses=frozenset({404}),
            )

        if response.status_code == 404 or not response.text.strip():
            return FetchResult.ok([], self.slug, original_url=url, total_results=0)

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ProviderError(f"memento-time: invalid JSON: {exc}", provider=self.slug) from exc
        if not isinstance(payload, dict):
            raise ProviderError("memento-time: unexpected timemap payload", provider=self.slug)

        mementos = (payload.get("mementos") or {}).get("list") or []
        original = clean_double_slashes(payload.get("original_uri") or url)
        pages = [
            ArchivedPage(
                url=original,
                timestamp=memento.get("datetime"),
                snapshot=memento["uri"],
                meta={
                    "original_timestamp": memento.get("datetime"),
                    "archive": memento.get("archive") or "unknown",
                    "position": position,
                    "provider": self.slug,
                },
            )
            for position, memento in enumerate(mementos)
            if isinstance(memento, dict) and memento.get("uri")
        ]
        if opts.limit:
            pages = pages[:opts.limit]

        logger.debug("memento-time: %s: %d mementos", url, len(pages))
        return FetchResult.ok(pages, self.slug, original_url=url, total_results=len(mementos))
