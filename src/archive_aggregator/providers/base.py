"""Abstract base class for archive providers.

Every bundled archive service subclasses :class:`ArchiveProvider` and
implements :meth:`~ArchiveProvider.fetch_snapshots`. Objects that do not
subclass it are still accepted by the facade as long as they satisfy
:class:`SupportsFetchSnapshots`.

Example usage::

    from archive_aggregator.providers.base import ArchiveProvider

    class MyArchive(ArchiveProvider):
        name = "My Archive"
        slug = "my-archive"

        async def fetch_snapshots(self, domain, options): ...
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from archive_aggregator.config.settings import get_settings
from archive_aggregator.core.models import FetchResult, RequestOptions
from archive_aggregator.core.options import OptionsLike, merge_options

logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsFetchSnapshots(Protocol):
    """Structural type of anything the facade can query.

    ``slug`` is optional; without one the provider is keyed by ``name``.
    """

    name: str

    async def fetch_snapshots(self, domain: str, options: RequestOptions) -> FetchResult:
        ...


def is_archive_provider(obj: Any) -> bool:
    """Return ``True`` if *obj* has a string ``name`` and a callable ``fetch_snapshots``."""
    return isinstance(getattr(obj, "name", None), str) and callable(
        getattr(obj, "fetch_snapshots", None)
    )


class ArchiveProvider(ABC):
    """Abstract base class for all archive providers.

    Subclasses define the class attributes ``name`` and ``slug`` and
    implement :meth:`fetch_snapshots`. Providers raise typed
    :class:`~archive_aggregator.core.exceptions.ProviderError` exceptions;
    turning them into failed results is the fetcher's job.

    Class Attributes:
        name: Human-readable service name (``"Common Crawl"``).
        slug: Stable identifier used in cache keys and page metadata
            (``"commoncrawl"``).

    Args:
        init_options: Options fixed at construction, merged underneath
            per-call options. Provider-specific keys (``api_key``,
            ``collection``, ``collapse``) go here too.
        http_client: Optional injected :class:`httpx.AsyncClient` for
            testing. When given it is used as-is and never closed.
    """

    name: str
    slug: Optional[str] = None

    def __init__(
        self,
        init_options: OptionsLike = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if isinstance(init_options, RequestOptions):
            init_options = init_options.model_dump(exclude_unset=True)
        self.init_options: dict[str, Any] = dict(init_options or {})
        self._http_client = http_client

    @abstractmethod
    async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
        """List captures of *domain* held by this archive.

        Implementations pass *options* through :meth:`resolve_options` first,
        so they can be called directly as well as through the fetcher.

        Args:
            domain: Domain, URL or URL pattern to look up.
            options: Options for this call.

        Returns:
            A successful :class:`FetchResult` (possibly with no pages).

        Raises:
            ProviderError: When the archive cannot be queried.
        """

    def resolve_options(self, options: OptionsLike = None) -> RequestOptions:
        """Merge :attr:`init_options` under *options*.

        Used when a provider is called directly rather than through
        :func:`~archive_aggregator.core.fetcher.fetch_with_cache`.
        """
        return merge_options(
            get_settings().default_request_options(), self.init_options, options
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} slug={self.slug!r}>"
