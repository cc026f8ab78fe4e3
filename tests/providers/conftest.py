"""Fixtures shared by the provider tests.

no_retry_delay  — (autouse) removes the back-off between HTTP attempts so
                  retry tests do not sleep.

Every test here mocks HTTP with respx; none needs network access.
"""

from __future__ import annotations

import pytest

from archive_aggregator.providers import _http


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(_http, "RETRY_DELAY_SECONDS", 0.0)
    monkeypatch.setattr(_http, "MAX_RETRY_AFTER_SECONDS", 0.0)
