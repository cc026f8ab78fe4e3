"""Tests for the timemap-based providers: Archive.today and Memento Time Travel.

Covers:
- Archive.today link-format timemap parsing: memento lines only, other
  domains ignored, trailing slashes removed, RFC 1123 dates normalized,
  position and capture hash in meta
- Archive.today 404 → success with no pages; limit applied
- Memento Time Travel JSON timemap parsing: archive name, position,
  original timestamp; entries without a URI skipped
- Memento 404 or empty body → success with no pages
- Memento non-object payload → ProviderError

These tests run without network access.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from archive_aggregator.core.exceptions import ProviderError
from archive_aggregator.providers.archive_today.config import AT_TIMEMAP_URL
from archive_aggregator.providers.archive_today.provider import ArchiveTodayProvider, parse_timemap
from archive_aggregator.providers.memento_time.config import MT_TIMEMAP_URL
from archive_aggregator.providers.memento_time.provider import MementoTimeProvider

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "api_responses"

_AT_URL = AT_TIMEMAP_URL.format(url="http://www.dr.dk")
_MT_URL = MT_TIMEMAP_URL.format(url="https://www.dr.dk")


def _fixture(path: str) -> str:
    return (FIXTURES_DIR / path).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Archive.today
# ---------------------------------------------------------------------------


class TestParseTimemap:
    def test_memento_lines_for_domain_become_pages(self) -> None:
        pages = parse_timemap(_fixture("archive_today/timemap.txt"), "www.dr.dk", "archive-today")

        assert [p.timestamp for p in pages] == [
            "2014-01-01T03:04:05Z",
            "2019-06-15T12:00:00Z",
            "2023-03-04T05:06:07Z",
        ]

    def test_trailing_slashes_are_removed(self) -> None:
        page = parse_timemap(_fixture("archive_today/timemap.txt"), "www.dr.dk", "archive-today")[0]

        assert page.url == "https://www.dr.dk"
        assert page.snapshot == "http://archive.md/20140101030405/https://www.dr.dk"

    def test_meta_carries_hash_date_and_position(self) -> None:
        pages = parse_timemap(_fixture("archive_today/timemap.txt"), "www.dr.dk", "archive-today")

        assert pages[1].meta == {
            "hash": "20190615120000",
            "raw_date": "Sat, 15 Jun 2019 12:00:00 GMT",
            "position": 1,
            "provider": "archive-today",
        }

    def test_text_without_mementos_gives_nothing(self) -> None:
        assert parse_timemap("<http://www.dr.dk/>; rel=\"original\"", "www.dr.dk", "archive-today") == []


class TestArchiveTodayProvider:
    @pytest.mark.asyncio
    async def test_fetch_requests_timemap_of_http_url(self) -> None:
        with respx.mock:
            route = respx.get(_AT_URL).mock(
                return_value=httpx.Response(200, text=_fixture("archive_today/timemap.txt"))
            )

            result = await ArchiveTodayProvider().fetch_snapshots("https://www.dr.dk")

        assert route.called
        assert len(result.pages) == 3
        assert result.meta["domain"] == "www.dr.dk"
        assert result.meta["empty"] is False

    @pytest.mark.asyncio
    async def test_limit_is_applied(self) -> None:
        with respx.mock:
            respx.get(_AT_URL).mock(
                return_value=httpx.Response(200, text=_fixture("archive_today/timemap.txt"))
            )

            result = await ArchiveTodayProvider().fetch_snapshots("www.dr.dk", {"limit": 2})

        assert len(result.pages) == 2

    @pytest.mark.asyncio
    async def test_404_means_no_captures(self) -> None:
        with respx.mock:
            respx.get(_AT_URL).mock(return_value=httpx.Response(404))

            result = await ArchiveTodayProvider().fetch_snapshots("www.dr.dk")

        assert result.success is True
        assert result.pages == []
        assert result.meta["empty"] is True


# ---------------------------------------------------------------------------
# Memento Time Travel
# ---------------------------------------------------------------------------


class TestMementoTimeProvider:
    @pytest.mark.asyncio
    async def test_mementos_become_pages(self) -> None:
        with respx.mock:
            respx.get(_MT_URL).mock(
                return_value=httpx.Response(200, text=_fixture("memento_time/timemap.json"))
            )

            result = await MementoTimeProvider().fetch_snapshots("www.dr.dk")

        assert result.success is True
        assert len(result.pages) == 3
        assert result.meta["original_url"] == "https://www.dr.dk"
        assert result.meta["total_results"] == 4

    @pytest.mark.asyncio
    async def test_page_fields(self) -> None:
        with respx.mock:
            respx.get(_MT_URL).mock(
                return_value=httpx.Response(200, text=_fixture("memento_time/timemap.json"))
            )

            result = await MementoTimeProvider().fetch_snapshots("www.dr.dk")

        first, second, third = result.pages
        assert first.url == "https://www.dr.dk/"
        assert first.timestamp == "2000-05-10T14:22:11Z"
        assert first.snapshot == "http://web.archive.org/web/20000510142211/http://www.dr.dk/"
        assert first.meta["archive"] == "ia"
        assert second.meta["position"] == 1
        assert third.meta["archive"] == "unknown"
        assert third.meta["original_timestamp"] == "2024-02-01T08:00:00Z"

    @pytest.mark.asyncio
    async def test_limit_is_applied(self) -> None:
        with respx.mock:
            respx.get(_MT_URL).mock(
                return_value=httpx.Response(200, text=_fixture("memento_time/timemap.json"))
            )

            result = await MementoTimeProvider().fetch_snapshots("www.dr.dk", {"limit": 1})

        assert len(result.pages) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [httpx.Response(404), httpx.Response(200, text="")])
    async def test_no_timemap_means_no_captures(self, response: httpx.Response) -> None:
        with respx.mock:
            respx.get(_MT_URL).mock(return_value=response)

            result = await MementoTimeProvider().fetch_snapshots("www.dr.dk")

        assert result.success is True
        assert result.pages == []
        assert result.meta["total_results"] == 0

    @pytest.mark.asyncio
    async def test_non_object_payload_raises(self) -> None:
        with respx.mock:
            respx.get(_MT_URL).mock(return_value=httpx.Response(200, json=["unexpected"]))

            with pytest.raises(ProviderError):
                await MementoTimeProvider().fetch_snapshots("www.dr.dk")
