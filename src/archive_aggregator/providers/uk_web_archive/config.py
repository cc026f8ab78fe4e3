"""Configuration for the UK Web Archive provider."""

from __future__ import annotations

UKWA_CDX_URL: str = "https://www.webarchive.org.uk/wayback/archive/cdx"
"""CDX server endpoint of the UK Web Archive open collection."""

UKWA_SNAPSHOT_BASE_URL: str = "https://www.webarchive.org.uk/wayback/archive"
"""Playback prefix; a capture lives at ``{base}/{timestamp}/{original}``."""

UKWA_FIELDS: str = "original,timestamp,statuscode"

UKWA_DEFAULT_LIMIT: int = 1000
