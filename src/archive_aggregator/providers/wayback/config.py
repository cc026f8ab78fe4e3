"""Configuration for the Wayback Machine provider.

Reference: https://github.com/internetarchive/wayback/tree/master/wayback-cdx-server
"""

from __future__ import annotations

WB_CDX_URL: str = "https://web.archive.org/cdx/search/cdx"
"""CDX server endpoint. Query parameters are appended as a query string."""

WB_SNAPSHOT_BASE_URL: str = "https://web.archive.org/web"
"""Playback prefix; a capture lives at ``{base}/{timestamp}/{original}``."""

WB_FIELDS: str = "original,timestamp,statuscode"
"""CDX ``fl`` parameter: the columns mapped into pages."""

WB_DEFAULT_COLLAPSE: str = "timestamp:4"
"""Default ``collapse``: one capture per year keeps result sets small.

Override per provider or per call with the ``collapse`` option (e.g.
``"digest"`` or ``"timestamp:8"`` for one capture per day).
"""

WB_DEFAULT_LIMIT: int = 1000
"""Records requested when no ``limit`` option is set."""
