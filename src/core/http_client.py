"""HTTP client utilities (httpx) with simple retry logic.

Separated from parsing so the transport can be swapped or mocked; tests pass
an ``httpx.Client`` built on ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional

import httpx

from config import settings

log = logging.getLogger(__name__)


class HttpError(RuntimeError):
    """Raised when a document cannot be fetched (transport failure or non-2xx)."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class Fetcher:
    """Fetch documents as text, following redirects.

    Transport failures are retried ``retries`` times with exponential backoff;
    an HTTP error status is final.
    """

    def __init__(
        self,
        *,
        client: Optional[httpx.Client] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: int | None = None,
        backoff_factor: float | None = None,
        headers: Optional[Dict[str, str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.retries = retries if retries is not None else settings.DEFAULT_RETRIES
        self.backoff_factor = (
            backoff_factor if backoff_factor is not None else settings.DEFAULT_BACKOFF_FACTOR
        )
        self._sleep = sleep
        self._owns_client = client is None
        if client is None:
            merged = {"User-Agent": user_agent or settings.DEFAULT_USER_AGENT}
            merged.update(headers or {})
            client = httpx.Client(
                headers=merged,
                timeout=timeout or settings.DEFAULT_TIMEOUT,
                follow_redirects=True,
            )
        self._client = client

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get(self, url: str, *, params: Optional[Dict[str, object]] = None) -> httpx.Response:
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self._client.get(url, params=params)
            except httpx.TransportError as e:
                if attempt > self.retries:
                    raise HttpError(
                        f"Failed to fetch {url} after {self.retries} retries: {e}", url=url
                    ) from e
                sleep_for = self.backoff_factor * (2 ** (attempt - 1))
                log.warning(
                    "[http] Attempt %d/%d failed for %s: %s. Retrying in %.1fs...",
                    attempt,
                    self.retries,
                    url,
                    e,
                    sleep_for,
                )
                self._sleep(sleep_for)
                continue
            if not resp.is_success:
                raise HttpError(
                    f"HTTP {resp.status_code} for {url}", url=url, status_code=resp.status_code
                )
            return resp

    def fetch(self, url: str) -> str:
        text = self.get(url).text
        log.debug("fetched %s (%d chars)", url, len(text))
        return text

    def fetch_json(self, url: str, *, params: Optional[Dict[str, object]] = None) -> object:
        resp = self.get(url, params=params)
        try:
            return resp.json()
        except ValueError as e:
            raise HttpError(f"Invalid JSON from {url}: {e}", url=url) from e
