"""
Shared test fixtures for httpreq tests.

Provides a record type mirroring a typical search request, a fixture that
pins the process timezone, and the ``integration`` marker.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from httpreq.destinations import ZERO_TIME


@dataclass
class SearchRequest:
    """Record populated by the tests, one attribute per supported kind."""

    fields: list[str] = field(default_factory=list)
    limit: int = 0
    page: int = 0
    timestamp: datetime = ZERO_TIME
    f: float = 0.0
    b: bool = False
    name: str = ""
    time: datetime = ZERO_TIME
    since: datetime | None = None


@pytest.fixture
def record_cls() -> type[SearchRequest]:
    return SearchRequest


@pytest.fixture
def record() -> SearchRequest:
    return SearchRequest()


@pytest.fixture
def utc_tz(monkeypatch: pytest.MonkeyPatch):
    """Pin the local timezone to UTC for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (end-to-end request decoding)",
    )

