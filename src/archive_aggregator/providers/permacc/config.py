"""Configuration for the Perma.cc provider.

Reference: https://perma.cc/docs/developer
"""

from __future__ import annotations

PERMACC_ARCHIVES_URL: str = "https://api.perma.cc/v1/public/archives/"
"""Public archives listing endpoint, filterable by ``url``."""

PERMACC_SNAPSHOT_BASE_URL: str = "https://perma.cc"
"""A record's snapshot is ``{base}/{guid}``."""

PERMACC_DEFAULT_LIMIT: int = 100
