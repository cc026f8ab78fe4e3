"""Configuration for the Memento Time Travel provider.

Reference: https://timetravel.mementoweb.org/guide/api/
"""

from __future__ import annotations

MT_TIMEMAP_URL: str = "https://timetravel.mementoweb.org/timemap/json/{url}"
"""JSON timemap of one original URL across all aggregated archives."""
