"""Shared HTTP plumbing for the bundled providers.

Internal module. Provides:

- :func:`open_client` — yield an injected client, or a fresh
  :class:`httpx.AsyncClient` configured from the request options.
- :func:`get_with_retries` — GET with a small retry loop for transient
  upstream failures, mapping the final failure to a typed
  :class:`~archive_aggregator.core.exceptions.ProviderError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import httpx

from archive_aggregator.config.settings import get_settings
from archive_aggregator.core.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
)
from archive_aggregator.core.models import RequestOptions

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: frozenset[int] = frozenset({408, 409, 425, 429, 500, 502, 503, 504})
"""Statuses treated as transient and retried up to ``options.retries`` times."""

RETRY_DELAY_SECONDS: float = 0.3
"""Base delay between attempts; grows linearly with the attempt number."""

MAX_RETRY_AFTER_SECONDS: float = 30.0
"""Upper bound on a server-supplied ``Retry-After`` honoured between attempts."""


def _timeout(options: RequestOptions) -> float | None:
    # 0 disables the timeout.
    return options.timeout or None


@asynccontextmanager
async def open_client(
    injected: httpx.AsyncClient | None,
    options: RequestOptions,
    headers: Mapping[str, str] | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an HTTP client for one provider call.

    An injected client is yielded unchanged and left open. Otherwise a new
    client is created with the configured User-Agent and
    ``options.timeout``, and closed on exit.
    """
    if injected is not None:
        yield injected
        return
    merged_headers = {"User-Agent": get_settings().user_agent, **(headers or {})}
    async with httpx.AsyncClient(
        timeout=_timeout(options),
        headers=merged_headers,
        follow_redirects=True,
    ) as client:
        yield client


def _retry_after(response: httpx.Response, default: float) -> float:
    try:
        return float(response.headers.get("Retry-After", default))
    except ValueError:
        return default


def _raise_for_status(response: httpx.Response, provider: str) -> None:
    status = response.status_code
    if status == 429:
        raise ProviderRateLimitError(
            f"{provider}: HTTP 429 rate limited",
            retry_after=_retry_after(response, 60.0),
            provider=provider,
        )
    if status in (401, 403):
        raise ProviderAuthError(
            f"{provider}: HTTP {status}, credentials rejected",
            provider=provider,
        )
    if status >= 400:
        raise ProviderError(f"{provider}: HTTP {status} from {response.url}", provider=provider)


async def get_with_retries(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    options: RequestOptions,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    ok_statuses: frozenset[int] = frozenset(),
) -> httpx.Response:
    """GET *url*, retrying transient failures.

    Request errors and the statuses in :data:`RETRY_STATUS_CODES` are
    retried ``options.retries`` times. Other 4xx responses fail at once.

    Args:
        client: HTTP client to send the request with.
        url: Absolute URL.
        provider: Provider slug, used in messages and on raised errors.
        options: Merged request options (``retries``, ``timeout``).
        params: Query string parameters.
        headers: Extra request headers.
        ok_statuses: Error statuses the caller handles itself; responses
            with these are returned instead of raising.

    Returns:
        The first successful (< 400) response, or one whose status is in
        *ok_statuses*.

    Raises:
        ProviderRateLimitError: On a final HTTP 429.
        ProviderAuthError: On HTTP 401 or 403.
        ProviderError: On any other final HTTP error or network failure.
    """
    attempts = options.retries + 1
    for attempt in range(1, attempts + 1):
        last_attempt = attempt == attempts
        try:
            response = await client.get(
                url,
                params=dict(params) if params else None,
                headers=dict(headers) if headers else None,
                timeout=_timeout(options),
            )
        except httpx.RequestError as exc:
            if last_attempt:
                raise ProviderError(f"{provider}: request error: {exc}", provider=provider) from exc
            logger.debug("%s: request error on attempt %d/%d: %s", provider, attempt, attempts, exc)
            await asyncio.sleep(RETRY_DELAY_SECONDS * attempt)
            continue

        if response.status_code in RETRY_STATUS_CODES and not last_attempt:
            delay = RETRY_DELAY_SECONDS * attempt
            if response.status_code == 429:
                delay = min(_retry_after(response, delay), MAX_RETRY_AFTER_SECONDS)
            logger.debug(
                "%s: HTTP %d on attempt %d/%d, retrying in %.1fs",
                provider,
                response.status_code,
                attempt,
                attempts,
                delay,
            )
            await asyncio.sleep(delay)
            continue

        if response.status_code not in ok_statuses:
            _raise_for_status(response, provider)
        return response

    raise ProviderError(f"{provider}: no attempt was made", provider=provider)  # pragma: no cover
