"""Application-wide exception hierarchy for archive-aggregator.

All custom exceptions subclass ``ArchiveAggregatorError``, enabling
consistent error handling and structured logging across the package.

Hierarchy::

    ArchiveAggregatorError
    ├── ProviderError
    │   ├── ProviderRateLimitError   (retry_after: float)
    │   └── ProviderAuthError
    ├── ArchiveFetchError            (errors: list[str])
    └── CacheError

Provider exceptions never cross the single-provider fetch boundary: the
fetcher in :mod:`archive_aggregator.core.fetcher` turns them into failed
:class:`~archive_aggregator.core.models.FetchResult` values.
"""

from __future__ import annotations


class ArchiveAggregatorError(Exception):
    """Base class for all archive-aggregator exceptions.

    Callers can catch the entire hierarchy with a single ``except`` clause
    when needed.
    """


# ---------------------------------------------------------------------------
# Provider exceptions
# ---------------------------------------------------------------------------


class ProviderError(ArchiveAggregatorError):
    """Raised when an archive provider fails to list snapshots.

    Args:
        message: Human-readable description of the failure.
        provider: Slug of the provider that failed (e.g. ``"wayback"``).
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderRateLimitError(ProviderError):
    """Raised when an upstream archive API answers HTTP 429.

    Args:
        message: Human-readable description of the rate limit.
        retry_after: Seconds to wait before retrying. Defaults to 60.
        provider: Provider slug.
    """

    def __init__(
        self,
        message: str,
        retry_after: float = 60.0,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class ProviderAuthError(ProviderError):
    """Raised when a provider is missing credentials or they are rejected.

    Perma.cc is the only bundled provider that needs one (an API key).
    """


# ---------------------------------------------------------------------------
# Aggregate exceptions
# ---------------------------------------------------------------------------


class ArchiveFetchError(ArchiveAggregatorError):
    """Raised by :meth:`Archive.fetch_pages` when no provider returned data.

    Args:
        message: The aggregated error message (``"; "``-joined).
        errors: Individual provider error messages, in provider order.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


# ---------------------------------------------------------------------------
# Storage exceptions
# ---------------------------------------------------------------------------


class CacheError(ArchiveAggregatorError):
    """Raised by a cache store when the backend is unavailable.

    Args:
        message: Description of the storage failure.
        key: The cache key involved, when there is one.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
