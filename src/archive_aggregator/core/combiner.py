"""Merge per-provider results into one response.

The combined answer is a success when at least one provider succeeded.
Pages from every successful provider are sorted newest first. The sort is
stable, so for equal timestamps the provider registered first comes first.
Captures with the same ``snapshot`` URL are reported once. ``limit`` is
applied after sorting so it reflects global recency.
"""

from __future__ import annotations

from archive_aggregator.core.models import ArchivedPage, FetchResult

NO_DATA_ERROR: str = "No archive provider returned data"


def _provider_id(result: FetchResult) -> str:
    meta = result.meta or {}
    return str(meta.get("provider") or meta.get("source") or "unknown")


def combine_results(results: list[FetchResult], limit: int | None = None) -> FetchResult:
    """Combine provider results into a single :class:`FetchResult`.

    Args:
        results: Provider results in registry order.
        limit: Maximum number of pages in the combined answer.

    Returns:
        The merged result. ``meta`` holds ``source="multiple"``, the
        comma-joined ``provider`` string, the ordered ``providers`` list,
        ``provider_count`` and, when any provider failed, ``errors``.
    """
    pages: list[ArchivedPage] = []
    errors: list[str] = []
    any_success = False

    for result in results:
        if result.success:
            any_success = True
            pages.extend(result.pages)
        elif result.error:
            errors.append(result.error)

    # ISO 8601 UTC strings sort chronologically; reverse=True keeps ties stable.
    pages.sort(key=lambda page: page.timestamp, reverse=True)

    seen: set[str] = set()
    unique: list[ArchivedPage] = []
    for page in pages:
        if page.snapshot in seen:
            continue
        seen.add(page.snapshot)
        unique.append(page)

    if limit:
        unique = unique[:limit]

    providers: list[str] = []
    for result in results:
        provider = _provider_id(result)
        if provider not in providers:
            providers.append(provider)

    meta: dict[str, object] = {
        "source": "multiple",
        "provider": ",".join(providers),
        "providers": providers,
        "provider_count": len(providers),
    }
    if errors:
        meta["errors"] = errors

    if any_success:
        return FetchResult(success=True, pages=unique, meta=meta)
    return FetchResult(
        success=False,
        pages=[],
        error="; ".join(errors) or NO_DATA_ERROR,
        meta=meta,
    )
