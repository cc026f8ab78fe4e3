"""Perma.cc snapshot listing via the public archives API."""

from __future__ import annotations

import logging
from typing import Any

from archive_aggregator.config.settings import get_settings
from archive_aggregator.core.exceptions import ProviderAuthError, ProviderError
from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike
from archive_aggregator.providers._http import get_with_retries, open_client
from archive_aggregator.providers._utils import clean_double_slashes, normalize_domain
from archive_aggregator.providers.base import ArchiveProvider
from archive_aggregator.providers.permacc.config import (
    PERMACC_ARCHIVES_URL,
    PERMACC_DEFAULT_LIMIT,
    PERMACC_SNAPSHOT_BASE_URL,
)
from archive_aggregator.providers.registry import register

logger = logging.getLogger(__name__)


@register
class PermaccProvider(ArchiveProvider):
    """Lists Perma.cc archives whose URL contains the queried domain.

    Provider-specific options:

    - ``api_key``: Perma.cc API key. Falls back to
      ``Settings.permacc_api_key``.

    Raises:
        ProviderAuthError: From :meth:`fetch_snapshots` when no key is
            configured or the key is rejected.
    """

    name: str = "Perma.cc"
    slug: str = "permacc"

    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        opts = self.resolve_options(options)
        api_key = opts.extra("api_key") or get_settings().permacc_api_key
        if not api_key:
            raise ProviderAuthError("API key is required for Perma.cc", provider=self.slug)

        clean_domain = normalize_domain(domain, append_wildcard=False)
        params: dict[str, Any] = {
            "limit": opts.limit or PERMACC_DEFAULT_LIMIT,
            "url": clean_domain,
        }

        async with open_client(self._http_client, opts) as client:
            response = await get_with_retries(
                client,
                PERMACC_ARCHIVES_URL,
                provider=self.slug,
                options=opts,
                params=params,
                headers={"Authorization": f"ApiKey {api_key}"},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(f"permacc: invalid JSON: {exc}", provider=self.slug) from exc

        if not isinstance(payload, dict):
            raise ProviderError("permacc: unexpected response payload", provider=self.slug)

        objects = payload.get("objects") or []
        pages: list[ArchivedPage] = []
        for item in objects:
            url = item.get("url") or ""
            guid = item.get("guid")
            if not guid or clean_domain not in url:
                continue
            pages.append(
                ArchivedPage(
                    url=clean_double_slashes(url),
                    timestamp=item.get("creation_timestamp"),
                    snapshot=f"{PERMACC_SNAPSHOT_BASE_URL}/{guid}",
                    meta={
                        "guid": guid,
                        "title": item.get("title"),
                        "status": item.get("status"),
                        "created_by": (item.get("created_by") or {}).get("id"),
                        "provider": self.slug,
                    },
                )
            )

        logger.debug("permacc: %s: %d archives", domain, len(pages))
        return FetchResult.ok(
            pages,
            self.slug,
            query_params=params,
            meta=payload.get("meta") or {},
        )
