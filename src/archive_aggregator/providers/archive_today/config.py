"""Configuration for the Archive.today provider."""

from __future__ import annotations

import re

AT_TIMEMAP_URL: str = "https://archive.is/timemap/{url}"
"""Memento timemap (link format) of one original URL."""

AT_MEMENTO_PATTERN: re.Pattern[str] = re.compile(
    r'<(https?://archive\.(?:is|today|md|ph)/([0-9]{8,14})/(?:https?://)?([^>]+))>;'
    r'\s*rel="(?:first\s+|last\s+)?memento";\s*datetime="([^"]+)"'
)
"""Matches one memento link: snapshot URL, capture id, original URL, datetime.

Example line::

    <http://archive.md/20140101030405/https://example.com/>; rel="memento"; datetime="Wed, 01 Jan 2014 03:04:05 GMT"
"""
