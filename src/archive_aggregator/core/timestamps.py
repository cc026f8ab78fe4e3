"""Timestamp normalization to strict ISO 8601 UTC.

Every :class:`~archive_aggregator.core.models.ArchivedPage` carries its
capture time as ``YYYY-MM-DDTHH:MM:SSZ``. Providers report captures in a
handful of native formats:

- CDX 14-digit timestamps (``20230115120000``), also shorter prefixes
  such as ``202301`` from collapsed queries;
- ISO 8601 with offset or fractional seconds (Perma.cc);
- RFC 1123 dates (Memento ``datetime`` attributes).

Unparseable values fall back to the current time. This fabricates data and
is kept on purpose so that every page stays sortable; the fallback is logged
at DEBUG level.
"""

from __future__ import annotations

import email.utils
import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

ISO_FORMAT: str = "%Y-%m-%dT%H:%M:%SZ"

_CDX_DIGITS = re.compile(r"^\d{4,14}$")
_STRICT_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

# (end offset, minimum value) of each two-digit field after the year
_CDX_FIELDS: tuple[tuple[int, str], ...] = ((6, "01"), (8, "01"), (10, "00"), (12, "00"), (14, "00"))


def utc_now_iso() -> str:
    """Return the current UTC time in strict ISO 8601 form."""
    return datetime.now(timezone.utc).strftime(ISO_FORMAT)


def format_iso(value: datetime) -> str:
    """Format a datetime as strict ISO 8601 UTC.

    Naive datetimes are assumed to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(ISO_FORMAT)


def _pad_cdx(timestamp: str) -> str:
    padded = timestamp
    for end, minimum in _CDX_FIELDS:
        partial = padded[end - 2:]
        if len(partial) >= 2:
            continue
        if not partial:
            padded += minimum
        else:
            # a lone "0" in month or day can only become "01"
            padded += minimum[1] if partial == "0" else "0"
    return padded


def parse_cdx_timestamp(timestamp: str | None) -> datetime | None:
    """Parse a CDX ``timestamp`` field (``YYYYMMDDhhmmss`` or a prefix of it).

    Missing trailing components are padded with their minimum value, so
    ``"2023"`` parses as 2023-01-01T00:00:00Z.

    Args:
        timestamp: Raw CDX timestamp.

    Returns:
        Timezone-aware UTC datetime, or ``None`` if the value is not a CDX
        timestamp.
    """
    if not timestamp or not _CDX_DIGITS.match(timestamp):
        return None
    padded = _pad_cdx(timestamp)
    try:
        return datetime.strptime(padded[:14], "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse(value: str) -> datetime | None:
    cdx = parse_cdx_timestamp(value)
    if cdx is not None:
        return cdx

    candidate = value.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass

    try:
        return email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


def to_iso_timestamp(value: str | datetime | None) -> str:
    """Normalize a provider timestamp to ``YYYY-MM-DDTHH:MM:SSZ``.

    Args:
        value: Provider-native timestamp string, a datetime, or ``None``.

    Returns:
        Strict ISO 8601 UTC string. Falls back to the current time when
        the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return format_iso(value)
    if value and _STRICT_ISO.match(value):
        return value
    parsed = _parse(value) if value else None
    if parsed is None:
        logger.debug("timestamps: could not parse '%s', using current time", value)
        return utc_now_iso()
    return format_iso(parsed)
