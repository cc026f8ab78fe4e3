"""Tests for the Perma.cc provider.

Covers:
- missing API key → ProviderAuthError before any request is made
- API key from options or from settings; sent as ``Authorization: ApiKey``
- only records whose URL contains the domain and that carry a guid are kept
- snapshot URL is https://perma.cc/{guid}; ISO timestamps normalized
- page meta: guid, title, status, created_by
- HTTP 401 → ProviderAuthError; non-object payload → ProviderError

These tests run without network access.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from archive_aggregator.core.exceptions import ProviderAuthError, ProviderError
from archive_aggregator.providers.permacc.config import PERMACC_ARCHIVES_URL
from archive_aggregator.providers.permacc.provider import PermaccProvider

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "api_responses" / "permacc"


def _archives_fixture() -> str:
    return (FIXTURES_DIR / "archives_response.json").read_text(encoding="utf-8")


class TestApiKey:
    @pytest.mark.asyncio
    async def test_missing_api_key_raises_before_request(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(PERMACC_ARCHIVES_URL).mock(return_value=httpx.Response(200, json={}))

            with pytest.raises(ProviderAuthError, match="API key is required"):
                await PermaccProvider().fetch_snapshots("dr.dk")

        assert not route.called

    @pytest.mark.asyncio
    async def test_api_key_option_is_sent_as_header(self) -> None:
        with respx.mock:
            route = respx.get(PERMACC_ARCHIVES_URL).mock(
                return_value=httpx.Response(200, text=_archives_fixture())
            )

            await PermaccProvider({"api_key": "pk_option"}).fetch_snapshots("dr.dk")

        assert route.calls.last.request.headers["Authorization"] == "ApiKey pk_option"

    @pytest.mark.asyncio
    async def test_api_key_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARCHIVE_AGGREGATOR_PERMACC_API_KEY", "pk_env")

        with respx.mock:
            route = respx.get(PERMACC_ARCHIVES_URL).mock(
                return_value=httpx.Response(200, text=_archives_fixture())
            )

            await PermaccProvider().fetch_snapshots("dr.dk")

        assert route.calls.last.request.headers["Authorization"] == "ApiKey pk_env"

    @pytest.mark.asyncio
    async def test_rejected_key_raises_auth_error(self) -> None:
        with respx.mock:
            respx.get(PERMACC_ARCHIVES_URL).mock(return_value=httpx.Response(401))

            with pytest.raises(ProviderAuthError):
                await PermaccProvider({"api_key": "bad"}).fetch_snapshots("dr.dk")


class TestParsing:
    @pytest.mark.asyncio
    async def test_only_matching_records_with_guid_are_kept(self) -> None:
        with respx.mock:
            respx.get(PERMACC_ARCHIVES_URL).mock(
                return_value=httpx.Response(200, text=_archives_fixture())
            )

            result = await PermaccProvider({"api_key": "k"}).fetch_snapshots("www.dr.dk")

        assert result.success is True
        assert len(result.pages) == 1
        page = result.pages[0]
        assert page.url == "https://www.dr.dk/nyheder"
        assert page.snapshot == "https://perma.cc/ABCD-1234"
        assert page.timestamp == "2021-03-04T05:06:07Z"
        assert page.meta == {
            "guid": "ABCD-1234",
            "title": "Nyheder - DR",
            "status": "complete",
            "created_by": 42,
            "provider": "permacc",
        }

    @pytest.mark.asyncio
    async def test_query_parameters_and_meta(self) -> None:
        with respx.mock:
            route = respx.get(PERMACC_ARCHIVES_URL).mock(
                return_value=httpx.Response(200, text=_archives_fixture())
            )

            result = await PermaccProvider({"api_key": "k"}).fetch_snapshots("https://www.dr.dk", {"limit": 5})

        params = route.calls.last.request.url.params
        assert params["url"] == "www.dr.dk"
        assert params["limit"] == "5"
        assert result.meta["meta"]["total_count"] == 3

    @pytest.mark.asyncio
    async def test_empty_object_list(self) -> None:
        with respx.mock:
            respx.get(PERMACC_ARCHIVES_URL).mock(
                return_value=httpx.Response(200, json={"meta": {}, "objects": []})
            )

            result = await PermaccProvider({"api_key": "k"}).fetch_snapshots("dr.dk")

        assert result.success is True
        assert result.pages == []

    @pytest.mark.asyncio
    async def test_non_object_payload_raises(self) -> None:
        with respx.mock:
            respx.get(PERMACC_ARCHIVES_URL).mock(return_value=httpx.Response(200, json=[1, 2]))

            with pytest.raises(ProviderError):
                await PermaccProvider({"api_key": "k"}).fetch_snapshots("dr.dk")
