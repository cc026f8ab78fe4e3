"""Shared pytest fixtures for archive-aggregator tests.

Fixture summary
---------------
clean_environment   — (autouse) drops ARCHIVE_AGGREGATOR_* variables and
                      resets cached settings and the default storage config.
memory_store        — fresh MemoryStore.
storage             — StorageConfig backed by ``memory_store``.
make_pages          — builds N ArchivedPage objects for a provider.

No test needs network access or a running Redis.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

import pytest

from archive_aggregator.config.settings import reset_settings
from archive_aggregator.core.models import ArchivedPage
from archive_aggregator.storage.cache import StorageConfig, reset_storage_config
from archive_aggregator.storage.memory import MemoryStore
from tests.factories.pages import ArchivedPageFactory

_ENV_PREFIX = "ARCHIVE_AGGREGATOR_"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the developer's environment and from each other."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX):
            monkeypatch.delenv(key)
    reset_settings()
    reset_storage_config()
    yield
    reset_settings()
    reset_storage_config()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def storage(memory_store: MemoryStore) -> StorageConfig:
    """Storage configuration with an isolated in-memory store."""
    return StorageConfig(store=memory_store, prefix="test")


@pytest.fixture
def make_pages() -> Callable[..., list[ArchivedPage]]:
    """Return a builder: ``make_pages(3, provider="wayback")``."""

    def _make(count: int, provider: str = "wayback", **overrides: object) -> list[ArchivedPage]:
        return ArchivedPageFactory.build_batch(count, provider=provider, **overrides)

    return _make
