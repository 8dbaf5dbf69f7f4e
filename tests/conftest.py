from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

import pytest

from core.http_client import HttpError


class FakeFetcher:
    """Serves canned documents by URL and records every request."""

    def __init__(self, pages: Dict[str, str] | None = None):
        self.pages: Dict[str, str] = dict(pages or {})
        self.failing: Dict[str, str] = {}
        self.calls: List[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url in self.failing:
            raise HttpError(self.failing[url], url=url, status_code=503)
        if url not in self.pages:
            raise HttpError(f"HTTP 404 for {url}", url=url, status_code=404)
        return self.pages[url]


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)
