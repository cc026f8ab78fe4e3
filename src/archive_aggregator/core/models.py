"""Pydantic models shared by the orchestration core and the providers.

- :class:`ArchivedPage` — one capture of a URL.
- :class:`FetchResult` — outcome of one provider call or of a combined call.
- :class:`RequestOptions` — effective configuration for one fetch.

All three are frozen: a page, a result and a resolved set of options are
never mutated after construction. ``FetchResult`` round-trips through JSON
(``model_dump_json`` / ``model_validate_json``) so the cache layer can store
it as an opaque string.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from archive_aggregator.core.timestamps import to_iso_timestamp

DEFAULT_CONCURRENCY: int = 3
DEFAULT_BATCH_SIZE: int = 20
DEFAULT_TIMEOUT_SECONDS: float = 10.0
DEFAULT_RETRIES: int = 1
DEFAULT_TTL_SECONDS: float = 7 * 24 * 60 * 60
"""Seven days."""


class ArchivedPage(BaseModel):
    """One discovered historical capture of a URL.

    Attributes:
        url: Canonicalized original page URL.
        timestamp: Capture time as ``YYYY-MM-DDTHH:MM:SSZ``. Any other
            format is normalized on construction.
        snapshot: Direct, dereferenceable URL of the archived artifact.
        meta: Provider-defined metadata. Always carries ``provider``.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    timestamp: str
    snapshot: str = Field(min_length=1)
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value: Any) -> str:
        return to_iso_timestamp(value)

    @property
    def provider(self) -> str | None:
        """Slug of the provider that produced this page."""
        return self.meta.get("provider")


class FetchResult(BaseModel):
    """Outcome of a snapshot listing.

    ``success=False`` always comes with an empty ``pages`` list and an
    ``error`` message; ``success=True`` never carries an ``error``.

    Attributes:
        success: Whether the provider (or any provider, when combined)
            returned data.
        pages: Captures, newest first for combined results.
        error: Failure description, present only on failure.
        meta: Response metadata (``source``, ``provider``,
            ``provider_count``, ``errors``, ``error_details`` ...).
        from_cache: ``True`` when the result was served from the cache.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    pages: list[ArchivedPage] = Field(default_factory=list)
    error: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    from_cache: bool = False

    @model_validator(mode="after")
    def _check_success_invariant(self) -> FetchResult:
        if self.success and self.error is not None:
            raise ValueError("a successful FetchResult cannot carry an error")
        if not self.success:
            if self.pages:
                raise ValueError("a failed FetchResult cannot carry pages")
            if not self.error:
                raise ValueError("a failed FetchResult requires an error message")
        return self

    @classmethod
    def ok(
        cls,
        pages: list[ArchivedPage],
        source: str,
        **meta: Any,
    ) -> FetchResult:
        """Build a successful result tagged with *source*."""
        return cls(
            success=True,
            pages=pages,
            meta={"source": source, "provider": source, **meta},
        )

    @classmethod
    def failure(
        cls,
        error: BaseException | str,
        source: str,
        **meta: Any,
    ) -> FetchResult:
        """Build a failed result from an exception or message."""
        if isinstance(error, BaseException):
            message = str(error) or type(error).__name__
            meta.setdefault("error_name", type(error).__name__)
            meta.setdefault("error_details", repr(error))
        else:
            message = error or "Unknown error"
        return cls(
            success=False,
            pages=[],
            error=message,
            meta={"source": source, "provider": source, **meta},
        )


class RequestOptions(BaseModel):
    """Effective, fully resolved configuration for one fetch.

    Built by :func:`archive_aggregator.core.options.merge_options`. Extra
    keys (``api_key``, ``collection``, ``collapse`` ...) are kept so that
    provider-specific settings pass through the core untouched.

    Attributes:
        limit: Maximum number of pages. ``None`` means provider default.
        cache: Read-through/write-through caching on or off.
        ttl: Cache TTL in seconds.
        concurrency: Maximum in-flight provider calls.
        batch_size: Chunk size for large provider lists.
        timeout: Per-request HTTP timeout in seconds.
        retries: Retry attempts for transient HTTP failures.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    limit: int | None = None
    cache: bool = True
    ttl: float = DEFAULT_TTL_SECONDS
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=0)
    retries: int = Field(default=DEFAULT_RETRIES, ge=0)

    def extra(self, key: str, default: Any = None) -> Any:
        """Return a provider-specific option, or *default* if unset."""
        return (self.model_extra or {}).get(key, default)
