"""Bounded parallel execution of async jobs.

:func:`run_bounded` fans a worker out over a list of items without letting
more than ``concurrency`` calls run at once:

- ``len(items) <= concurrency``: every item starts immediately.
- otherwise items are processed in chunks of ``batch_size``. Inside a chunk
  an ``asyncio.Semaphore`` keeps a sliding window of at most
  ``concurrency`` in-flight calls; the next item starts as soon as a slot
  frees. Chunk N+1 starts only after chunk N has drained.

Results come back in input order whatever the completion order. A worker
that raises is logged and contributes no entry; the other results keep
their relative order. There is no cancellation primitive: a stalled worker
holds its slot until it finishes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_FAILED = object()


async def _isolated(worker: Callable[[T], Awaitable[R]], item: T) -> R | object:
    try:
        return await worker(item)
    except asyncio.CancelledError:
        raise
    except Exception:  # noqa: BLE001
        logger.exception("parallel: worker failed for item %r", item)
        return _FAILED


async def _run_window(
    chunk: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    semaphore: asyncio.Semaphore,
) -> list[R | object]:
    async def _slot(item: T) -> R | object:
        async with semaphore:
            return await _isolated(worker, item)

    return await asyncio.gather(*(_slot(item) for item in chunk))


async def run_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
    batch_size: int,
) -> list[R]:
    """Run *worker* over *items* with a concurrency ceiling.

    Args:
        items: Inputs, one worker call each.
        worker: Async callable applied to every item.
        concurrency: Maximum simultaneous worker calls (values below 1 are
            treated as 1).
        batch_size: Chunk size used when ``len(items) > concurrency``
            (values below 1 are treated as 1).

    Returns:
        Worker results in the same order as *items*, minus entries for
        workers that raised.
    """
    concurrency = max(1, concurrency)
    batch_size = max(1, batch_size)

    if len(items) <= concurrency:
        outcomes = await asyncio.gather(*(_isolated(worker, item) for item in items))
    else:
        outcomes = []
        semaphore = asyncio.Semaphore(concurrency)
        for start in range(0, len(items), batch_size):
            chunk = items[start:start + batch_size]
            outcomes.extend(await _run_window(chunk, worker, semaphore))
            logger.debug(
                "parallel: chunk %d-%d of %d drained",
                start,
                start + len(chunk),
                len(items),
            )

    return [outcome for outcome in outcomes if outcome is not _FAILED]  # type: ignore[misc]
