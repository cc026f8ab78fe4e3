"""Unit tests for the Archive facade.

Covers:
- single provider: result passed through unchanged
- several providers: merge, newest first, registry order for ties
- partial failure (success with meta.errors) and total failure
- limit applied after merging
- empty registry
- fetch_pages() raises ArchiveFetchError on total failure
- registry: append order, chaining, awaitable providers resolved once under
  concurrent calls, structural and slug-less providers accepted, non-providers
  rejected
- option precedence: call > instance > settings
- fetch_id is set for the duration of a call
- concurrency ceiling across providers

All providers are in-memory stubs from ``tests.factories.providers``.
"""

from __future__ import annotations

import asyncio

import pytest

from archive_aggregator.core.archive import NO_PROVIDERS_ERROR, Archive
from archive_aggregator.core.exceptions import ArchiveFetchError, ProviderError
from archive_aggregator.core.logging_config import fetch_id_var
from archive_aggregator.core.models import ArchivedPage, FetchResult
from archive_aggregator.core.options import OptionsLike
from tests.factories.pages import ArchivedPageFactory
from tests.factories.providers import DuckProvider, SluglessProvider, StubProvider


def _page(snapshot: str, timestamp: str, provider: str) -> ArchivedPage:
    return ArchivedPageFactory.build(snapshot=snapshot, timestamp=timestamp, provider=provider)


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


class TestSingleProvider:
    @pytest.mark.asyncio
    async def test_single_provider_result_is_passed_through(self, storage, make_pages) -> None:
        pages = make_pages(3)
        archive = Archive([StubProvider("wayback", pages)], storage=storage)

        result = await archive.fetch_snapshots("example.com")

        assert result.success is True
        assert result.pages == pages
        assert result.meta["source"] == "wayback"
        assert "provider_count" not in result.meta

    @pytest.mark.asyncio
    async def test_single_provider_failure_keeps_its_error(self, storage) -> None:
        archive = Archive(StubProvider("wayback", error=ProviderError("HTTP 503")), storage=storage)

        result = await archive.fetch_snapshots("example.com")

        assert result.success is False
        assert result.error == "HTTP 503"
        assert result.meta["error_name"] == "ProviderError"


class TestMultipleProviders:
    @pytest.mark.asyncio
    async def test_pages_are_merged_newest_first(self, storage) -> None:
        archive = Archive(
            [
                StubProvider("wayback", [_page("w-old", "2015-01-01T00:00:00Z", "wayback")]),
                StubProvider("commoncrawl", [_page("c-new", "2022-01-01T00:00:00Z", "commoncrawl")]),
            ],
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com")

        assert [p.snapshot for p in result.pages] == ["c-new", "w-old"]
        assert result.meta["provider_count"] == 2
        assert result.meta["providers"] == ["wayback", "commoncrawl"]

    @pytest.mark.asyncio
    async def test_equal_timestamps_follow_registry_order_regardless_of_speed(self, storage) -> None:
        ts = "2020-01-01T00:00:00Z"
        archive = Archive(
            [
                StubProvider("slow", [_page("slow", ts, "slow")], delay=0.02),
                StubProvider("fast", [_page("fast", ts, "fast")]),
            ],
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com")

        assert [p.snapshot for p in result.pages] == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_partial_failure_is_success_with_errors(self, storage, make_pages) -> None:
        archive = Archive(
            [
                StubProvider("wayback", error=ProviderError("HTTP 500")),
                StubProvider("commoncrawl", make_pages(2, provider="commoncrawl")),
            ],
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com")

        assert result.success is True
        assert len(result.pages) == 2
        assert result.meta["errors"] == ["HTTP 500"]

    @pytest.mark.asyncio
    async def test_total_failure_aggregates_errors(self, storage) -> None:
        archive = Archive(
            [
                StubProvider("wayback", error=ProviderError("timeout")),
                StubProvider("permacc", error=ProviderError("API key is required for Perma.cc")),
            ],
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com")

        assert result.success is False
        assert result.pages == []
        assert result.error == "timeout; API key is required for Perma.cc"

    @pytest.mark.asyncio
    async def test_limit_is_applied_after_merge(self, storage) -> None:
        archive = Archive(
            [
                StubProvider("a", [_page("a1", "2010-01-01T00:00:00Z", "a"), _page("a2", "2021-01-01T00:00:00Z", "a")]),
                StubProvider("b", [_page("b1", "2023-01-01T00:00:00Z", "b"), _page("b2", "2001-01-01T00:00:00Z", "b")]),
            ],
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com", {"limit": 2})

        assert [p.snapshot for p in result.pages] == ["b1", "a2"]

    @pytest.mark.asyncio
    async def test_same_query_gives_same_answer(self, storage, make_pages) -> None:
        archive = Archive(
            [
                StubProvider("a", make_pages(3, provider="a"), delay=0.01),
                StubProvider("b", make_pages(3, provider="b")),
            ],
            {"cache": False},
            storage=storage,
        )

        first = await archive.fetch_snapshots("example.com")
        second = await archive.fetch_snapshots("example.com")

        assert first.pages == second.pages

    @pytest.mark.asyncio
    async def test_concurrency_option_bounds_in_flight_providers(self, storage) -> None:
        in_flight = 0
        peak = 0

        class _CountingProvider(StubProvider):
            async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                try:
                    await asyncio.sleep(0.005)
                    return FetchResult.ok([], self.slug)
                finally:
                    in_flight -= 1

        archive = Archive(
            [_CountingProvider(f"p{i}") for i in range(8)],
            {"concurrency": 2, "cache": False},
            storage=storage,
        )

        result = await archive.fetch_snapshots("example.com")

        assert result.meta["provider_count"] == 8
        assert peak == 2


class TestEmptyRegistry:
    @pytest.mark.asyncio
    async def test_no_providers_is_a_failure(self, storage) -> None:
        result = await Archive(storage=storage).fetch_snapshots("example.com")

        assert result.success is False
        assert result.error == NO_PROVIDERS_ERROR
        assert result.meta["provider_count"] == 0

    @pytest.mark.asyncio
    async def test_fetch_pages_raises_for_empty_registry(self, storage) -> None:
        with pytest.raises(ArchiveFetchError):
            await Archive(storage=storage).fetch_pages("example.com")


class TestFetchPages:
    @pytest.mark.asyncio
    async def test_returns_pages_on_success(self, storage, make_pages) -> None:
        pages = make_pages(2)
        archive = Archive([StubProvider("wayback", pages)], storage=storage)

        assert await archive.fetch_pages("example.com") == pages

    @pytest.mark.asyncio
    async def test_raises_with_individual_errors(self, storage) -> None:
        archive = Archive(
            [
                StubProvider("a", error=ProviderError("first")),
                StubProvider("b", error=ProviderError("second")),
            ],
            storage=storage,
        )

        with pytest.raises(ArchiveFetchError) as exc_info:
            await archive.fetch_pages("example.com")

        assert str(exc_info.value) == "first; second"
        assert exc_info.value.errors == ["first", "second"]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    @pytest.mark.asyncio
    async def test_register_provider_appends_and_chains(self, storage) -> None:
        archive = Archive([StubProvider("a")], storage=storage)

        returned = await archive.register_provider(StubProvider("b"))
        await archive.register_providers([StubProvider("c"), StubProvider("d")])

        assert returned is archive
        assert [p.slug for p in await archive.providers()] == ["a", "b", "c", "d"]

    @pytest.mark.asyncio
    async def test_registered_order_reaches_combined_result(self, storage, make_pages) -> None:
        archive = Archive([StubProvider("a", make_pages(1, provider="a"))], storage=storage)

        await archive.register_provider(StubProvider("c", make_pages(1, provider="c")))
        await archive.register_provider(StubProvider("d", make_pages(1, provider="d")))
        result = await archive.fetch_snapshots("example.com")

        assert result.success is True
        assert result.meta["providers"] == ["a", "c", "d"]

    @pytest.mark.asyncio
    async def test_providers_returns_a_copy(self, storage) -> None:
        archive = Archive([StubProvider("a")], storage=storage)

        listed = await archive.providers()
        listed.clear()

        assert len(await archive.providers()) == 1

    @pytest.mark.asyncio
    async def test_awaitable_providers_resolve_once_under_concurrent_calls(self, storage, make_pages) -> None:
        created = 0

        async def _make_provider() -> StubProvider:
            nonlocal created
            created += 1
            await asyncio.sleep(0.01)
            return StubProvider("wayback", make_pages(1))

        archive = Archive([_make_provider(), StubProvider("commoncrawl")], storage=storage)

        results = await asyncio.gather(
            archive.fetch_snapshots("a.dk", {"cache": False}),
            archive.fetch_snapshots("b.dk", {"cache": False}),
            archive.fetch_snapshots("c.dk", {"cache": False}),
        )

        assert created == 1
        assert all(r.success for r in results)
        assert [p.slug for p in await archive.providers()] == ["wayback", "commoncrawl"]

    @pytest.mark.asyncio
    async def test_awaitable_keeps_its_registry_position(self, storage) -> None:
        async def _late() -> StubProvider:
            await asyncio.sleep(0.005)
            return StubProvider("late")

        archive = Archive([StubProvider("first")], storage=storage)
        await archive.register_providers([_late(), StubProvider("last")])

        assert [p.slug for p in await archive.providers()] == ["first", "late", "last"]

    @pytest.mark.asyncio
    async def test_structural_provider_is_accepted(self, storage, make_pages) -> None:
        archive = Archive([DuckProvider("duck", make_pages(2, provider="duck"))], storage=storage)

        result = await archive.fetch_snapshots("example.com")

        assert result.success is True
        assert len(result.pages) == 2

    @pytest.mark.asyncio
    async def test_provider_without_slug_is_keyed_by_name(self, storage, make_pages) -> None:
        provider = SluglessProvider("Local Mirror", make_pages(2, provider="local"))
        archive = Archive(provider, storage=storage)

        first = await archive.fetch_snapshots("example.com")
        second = await archive.fetch_snapshots("example.com")

        assert first.success is True
        assert len(first.pages) == 2
        assert second.from_cache is True
        assert provider.calls == 1
        assert await storage.store.list_keys() == [f"{storage.prefix}:Local Mirror:example.com"]

    @pytest.mark.asyncio
    async def test_provider_without_slug_can_be_registered(self, storage, make_pages) -> None:
        archive = Archive([StubProvider("a", make_pages(1, provider="a"))], storage=storage)

        await archive.register_provider(SluglessProvider("Local Mirror", make_pages(1, provider="local")))

        assert [p.name for p in await archive.providers()] == ["A", "Local Mirror"]

    @pytest.mark.asyncio
    async def test_non_provider_is_rejected(self, storage) -> None:
        archive = Archive(storage=storage)

        with pytest.raises(TypeError):
            await archive.register_provider(object())  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Options and context
# ---------------------------------------------------------------------------


class TestOptions:
    @pytest.mark.asyncio
    async def test_call_options_override_instance_options(self, storage, make_pages) -> None:
        provider = StubProvider("wayback", make_pages(10))
        archive = Archive([provider], {"limit": 5, "timeout": 4}, storage=storage)

        result = await archive.fetch_snapshots("example.com", {"limit": 3})

        _, options = provider.calls[0]
        assert len(result.pages) == 3
        assert options.limit == 3
        assert options.timeout == 4

    @pytest.mark.asyncio
    async def test_instance_options_override_settings(
        self, storage, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ARCHIVE_AGGREGATOR_RETRIES", "4")
        monkeypatch.setenv("ARCHIVE_AGGREGATOR_TIMEOUT_SECONDS", "9")
        provider = StubProvider("wayback")
        archive = Archive([provider], {"retries": 0}, storage=storage)

        await archive.fetch_snapshots("example.com")

        _, options = provider.calls[0]
        assert options.retries == 0
        assert options.timeout == 9

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, storage, make_pages) -> None:
        provider = StubProvider("wayback", make_pages(2))
        archive = Archive([provider], storage=storage)

        await archive.fetch_snapshots("example.com")
        cached = await archive.fetch_snapshots("example.com")

        assert cached.from_cache is True
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_fetch_id_is_set_during_call_only(self, storage) -> None:
        seen: list[str | None] = []

        class _RecordingProvider(StubProvider):
            async def fetch_snapshots(self, domain: str, options: OptionsLike = None) -> FetchResult:
                seen.append(fetch_id_var.get())
                return FetchResult.ok([], self.slug)

        archive = Archive([_RecordingProvider("a"), _RecordingProvider("b")], storage=storage)

        await archive.fetch_snapshots("example.com")

        assert seen[0] is not None
        assert seen[0] == seen[1]
        assert fetch_id_var.get() is None
