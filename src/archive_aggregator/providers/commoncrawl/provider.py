"""Common Crawl snapshot listing via the CC index server.

**Design notes**:

- The collection comes from the ``collection`` option. Without one (or
  with ``"CC-MAIN-latest"``) the newest entry of ``collinfo.json`` is used;
  if that lookup fails the provider falls back to ``CC-MAIN-latest-index``.
- The index answers newline-delimited JSON, one capture per line.
- HTTP 404 means "no captures" on this server and yields an empty result.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from archive_aggregator.core.exceptions import ProviderError
from archive_aggregator.core.models import ArchivedPage, FetchResult, RequestOptions
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import clean_double_slashes, normalize_domain
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.commoncrawl.config import (
    CC_COLLINFO_URL,
    CC_DATA_BASE_URL,
    CC_DEFAULT_COLLAPSE,
    CC_DEFAULT_LIMIT,
    CC_FIELDS,
    CC_INDEX_BASE_URL,
    CC_LATEST,
)
from archive_aggregator.providers.registry import register

logger = logging.getLogger(__name__)


def index_name(collection: str) -> str:
    """Return the index path segment for a collection name."""
    return collection if collection.endswith("-index") else f"{collection}-index"


def _collection_from_collinfo(entries: Any) -> tuple[str, str] | None:
    if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
        return None
    newest = entries[0]
    cdx_api = newest.get("cdx-api")
    if isinstance(cdx_api, str) and cdx_api:
        path = urlparse(cdx_api).path if cdx_api.startswith("http") else cdx_api
        path = path.lstrip("/")
        return path.removesuffix("-index"), path
    identifier = newest.get("id") or newest.get("name")
    if isinstance(identifier, str) and identifier:
        return identifier.removesuffix("-index"), index_name(identifier)
    return None


@register
class CommonCrawlProvider(ArchiveProvider):
    """Lists Common Crawl captures of a domain.

    Provider-specific options:

    - ``collection``: crawl identifier such as ``"CC-MAIN-2024-10"``.
    """

    name: str = "Common Crawl"
    slug: str = "commoncrawl"

    async def _resolve_collection(
        self,
        client: httpx.AsyncClient,
        opts: RequestOptions,
    ) -> tuple[str, str]:
        """Return ``(collection, index path)`` for this call."""
        collection = opts.extra("collection")
        if collection and collection != CC_LATEST:
            return collection, index_name(collection)

        try:
            response = await get_with_retries(
                client, CC_COLLINFO_URL, provider=self.slug, options=opts
            )
            resolved = _collection_from_collinfo(response.json())
        except (ProviderError, ValueError) as exc:
            logger.warning("commoncrawl: collinfo lookup failed (%s), using %s", exc, CC_LATEST)
            resolved = None
        return resolved or (CC_LATEST, index_name(CC_LATEST))

    def _to_page(self, record: dict[str, Any], collection: str) -> ArchivedPage | None:
        url = clean_double_slashes(str(record.get("url") or ""))
        filename = record.get("filename")
        raw_timestamp = record.get("timestamp") or ""
        if not url or not filename:
            return None
        status = str(record.get("status") or "")
        return ArchivedPage(
            url=url,
            timestamp=raw_timestamp,
            snapshot=f"{CC_DATA_BASE_URL}/{filename}",
            meta={
                "timestamp": raw_timestamp,
                "status": int(status) if status.isdigit() else 0,
                "digest": record.get("digest"),
                "mime": record.get("mime"),
                "length": record.get("length"),
                "offset": record.get("offset"),
                "filename": filename,
                "collection": collection,
                "provider": self.slug,
            },
        )

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        params: dict[str, Any] = {
            "url": normalize_domain(domain),
            "output": "json",
            "fl": CC_FIELDS,
            "collapse": CC_DEFAULT_COLLAPSE,
            "limit": str(opts.limit or CC_DEFAULT_LIMIT),
        }

        async with open_client(self._http_client, opts) as client:
            collection, index = await self._resolve_collection(client, opts)
            response = await get_with_retries(
                client,
                f"{CC_INDEX_BASE_URL}/{index}",
                provider=self.slug,
                options=opts,
                params=params,
                ok_statuses=frozenset({404}),
            )

        pages: list[ArchivedPage] = []
        if response.status_code != 404:
            for line in response.text.splitlines():
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except ValueError:
                    logger.debug("commoncrawl: skipping malformed index line %r", line[:200])
                    continue
                page = self._to_page(record, collection) if isinstance(record, dict) else None
                if page is not None:
                    pages.append(page)

        logger.debug("commoncrawl: %s in %s: %d captures", domain, collection, len(pages))
        return FetchResult.ok(
            pages,
            self.slug,
            collection=collection,
            count=len(pages),
            query_params=params,
        )
