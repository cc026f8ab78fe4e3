"""URL helpers shared by the providers."""

from __future__ import annotations

import re

_PROTOCOL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_DOUBLE_SLASH = re.compile(r"(?<!:)/{2,}")


def strip_protocol(url: str) -> str:
    """Remove a leading ``scheme://`` from *url*."""
    return _PROTOCOL.sub("", url, count=1)


def has_protocol(url: str) -> bool:
    return bool(_PROTOCOL.match(url))


def normalize_domain(domain: str, append_wildcard: bool = True) -> str:
    """Turn a user-supplied domain or URL into an archive query pattern.

    The scheme is dropped. Unless the input already holds a ``*``, a
    trailing ``/*`` is appended for prefix matching.

    >>> normalize_domain("https://example.com")
    'example.com/*'
    >>> normalize_domain("example.com", append_wildcard=False)
    'example.com'
    """
    normalized = strip_protocol(domain.strip())
    if "*" in domain or not append_wildcard:
        return normalized
    if not normalized.endswith("/"):
        normalized += "/"
    return normalized + "*"


def clean_double_slashes(url: str) -> str:
    """Collapse repeated slashes, keeping the one after the scheme.

    >>> clean_double_slashes("https://example.com//a///b")
    'https://example.com/a/b'
    """
    return _DOUBLE_SLASH.sub("/", url)


def ensure_protocol(url: str, scheme: str = "https") -> str:
    """Prefix *url* with ``scheme://`` unless it already has a scheme."""
    return url if has_protocol(url) else f"{scheme}://{url}"
