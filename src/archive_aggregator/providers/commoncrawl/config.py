"""Configuration for the Common Crawl provider.

Reference: https://index.commoncrawl.org/
"""

from __future__ import annotations

CC_INDEX_BASE_URL: str = "https://index.commoncrawl.org"
"""Host of the per-collection CDX indexes (``/{collection}-index``)."""

CC_COLLINFO_URL: str = "https://index.commoncrawl.org/collinfo.json"
"""Listing of available crawl collections, newest first."""

CC_DATA_BASE_URL: str = "https://data.commoncrawl.org"
"""Host serving WARC files; a capture's snapshot is ``{base}/{filename}``."""

CC_LATEST: str = "CC-MAIN-latest"
"""Sentinel collection name meaning "look up the newest crawl"."""

CC_FIELDS: str = "url,timestamp,status,mime,length,offset,filename,digest"

CC_DEFAULT_COLLAPSE: str = "digest"

CC_DEFAULT_LIMIT: int = 1000
