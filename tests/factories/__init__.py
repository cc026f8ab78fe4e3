"""Factory Boy factories for test data generation.

Available factories
-------------------
ArchivedPageFactory     — ArchivedPage with a unique snapshot URL
StubProvider            — canned-response ArchiveProvider (in providers.py)
DuckProvider            — structural provider without the base class (in providers.py)
SluglessProvider        — structural provider with a name but no slug (in providers.py)
FetchResultFactory      — successful FetchResult for one provider
"""

from __future__ import annotations

from tests.factories.pages import ArchivedPageFactory, FetchResultFactory

__all__ = [
    "ArchivedPageFactory",
    "FetchResultFactory",
]
