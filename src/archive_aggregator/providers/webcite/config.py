"""Configuration for the WebCite provider."""

from __future__ import annotations

WEBCITE_QUERY_URL: str = "https://www.webcitation.org/query"
"""Lookup endpoint taking the original URL as the ``url`` parameter."""

WEBCITE_NOT_FOUND_MARKER: str = "We are currently not accepting archiving requests"
"""Text of the notice page WebCite serves when it holds no archive."""

WEBCITE_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}
"""WebCite rejects requests without browser-like headers."""
