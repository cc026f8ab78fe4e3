"""CDX server response handling shared by Wayback-style providers.

A CDX query with ``output=json`` answers with a 2D JSON array: the first
row holds the field names, every following row one capture. Both the
Internet Archive and the UK Web Archive run this server.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from archive_aggregator.core.exceptions import ProviderError
from archive_aggregator.core.models import ArchivedPage
from archive_aggregator.providers._utils import clean_double_slashes

logger = logging.getLogger(__name__)


def parse_cdx_json(response: httpx.Response, provider: str) -> list[dict[str, str]]:
    """Decode a CDX JSON response into one dict per capture row.

    An empty body or a header-only array yields no rows. Rows whose length
    does not match the header are skipped.

    Raises:
        ProviderError: If the body is not a JSON array.
    """
    if not response.text.strip():
        return []
    try:
        data: Any = response.json()
    except ValueError as exc:
        raise ProviderError(f"{provider}: invalid CDX JSON: {exc}", provider=provider) from exc
    if not isinstance(data, list):
        raise ProviderError(f"{provider}: unexpected CDX payload type {type(data).__name__}", provider=provider)
    if len(data) <= 1:
        return []

    field_names: list[str] = [str(name) for name in data[0]]
    rows: list[dict[str, str]] = []
    for row in data[1:]:
        if isinstance(row, list) and len(row) == len(field_names):
            rows.append(dict(zip(field_names, row)))
        else:
            logger.debug("%s: skipping malformed CDX row %r", provider, row)
    return rows


def map_cdx_rows(
    rows: list[dict[str, str]],
    snapshot_base_url: str,
    provider: str,
) -> list[ArchivedPage]:
    """Convert CDX capture rows into pages.

    The snapshot locator is ``{snapshot_base_url}/{timestamp}/{original}``.
    ``meta`` keeps the raw CDX timestamp and the numeric capture status.
    Rows without an ``original`` URL or a timestamp are dropped.
    """
    pages: list[ArchivedPage] = []
    for row in rows:
        original = clean_double_slashes(row.get("original", ""))
        raw_timestamp = row.get("timestamp", "")
        if not original or not raw_timestamp:
            continue
        status = row.get("statuscode", "")
        pages.append(
            ArchivedPage(
                url=original,
                timestamp=raw_timestamp,
                snapshot=f"{snapshot_base_url}/{raw_timestamp}/{original}",
                meta={
                    "timestamp": raw_timestamp,
                    "status": int(status) if status.isdigit() else 0,
                    "provider": provider,
                },
            )
        )
    return pages
