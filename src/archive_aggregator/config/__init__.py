"""Configuration package for archive-aggregator.

Re-exports the settings symbols so that callers can write::

    from archive_aggregator.config import get_settings
"""

from __future__ import annotations

from archive_aggregator.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
]
