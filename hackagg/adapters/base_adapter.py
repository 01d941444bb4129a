# hackagg/adapters/base_adapter.py

"""Abstract base class for all hackathon catalog adapters."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from hackagg.adapters.resilience import (
    CircuitBreaker,
    RequestPacer,
    blocked_marker,
)
from hackagg.config.settings import Settings
from hackagg.filters.deduplicator import ListingDeduplicator
from hackagg.models.listing import RawListing


class SourceFetchError(Exception):
    """An adapter could not reach or read its catalog."""

    def __init__(self, source_id: str, message: str) -> None:
        super().__init__(f"[{source_id}] {message}")
        self.source_id = source_id


class BaseAdapter(ABC):
    """Abstract base class for all hackathon catalog adapters.

    Subclasses set ``source_id`` and ``base_url`` and implement
    :meth:`_fetch_records`.  :meth:`fetch` deduplicates the batch by
    link before handing it to the aggregation cache.

    Adapters are synchronous; the cache runs each one in a worker
    thread.  One adapter instance serves one catalog for the life of
    the process, so its pacer and breaker state carry across
    refreshes.
    """

    source_id: str = ""
    base_url: str = ""

    def __init__(self, headers: dict[str, str] | None = None) -> None:
        self.logger = logging.getLogger(f"hackagg.{self.source_id}")
        self.settings = Settings()
        self.extra_headers: dict[str, str] = dict(headers or {})
        self.selectors: dict[str, str] = self._load_selectors()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.pacer = RequestPacer(
            self.settings.REQUEST_DELAY,
            self.settings.MAX_DELAY_MULTIPLIER,
        )
        self.breaker = CircuitBreaker(
            self.source_id,
            self.settings.CIRCUIT_BREAKER_THRESHOLD,
            self.settings.CIRCUIT_BREAKER_COOLDOWN,
        )
        self._deadline: float | None = None

    def _load_selectors(self) -> dict[str, str]:
        """This source's CSS selectors from selectors.json ({} if none)."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, str] = all_selectors.get(self.source_id, {})
        return result

    def _time_left(self) -> float | None:
        """Seconds left in the running fetch() budget, None outside fetch()."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def _request_timeout(self) -> float:
        """Timeout for the next request; 0 once the budget is spent."""
        left = self._time_left()
        if left is None:
            return float(self.settings.REQUEST_TIMEOUT)
        return min(float(self.settings.REQUEST_TIMEOUT), left)

    def _wait(self) -> None:
        """Pause between paginated requests, never past the budget."""
        self.pacer.wait(self._time_left())

    def _build_headers(self, **overrides: str) -> dict[str, str]:
        """Default browser headers plus adapter and call overrides."""
        return {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self._get_homepage(),
            **self.extra_headers,
            **overrides,
        }

    def _on_status(self, url: str, attempt: int, status: int) -> None:
        self.logger.warning(
            "[%s] HTTP %d on attempt %d for %s",
            self.source_id,
            status,
            attempt,
            url,
        )
        if status in (429, 403):
            delay = self.pacer.escalate()
            self.logger.warning(
                "[%s] Rate-limited, delay escalated to %.1fs",
                self.source_id,
                delay,
            )

    def _fetch_get(
        self,
        url: str,
        headers: dict[str, str],
    ) -> curl_requests.Response | None:
        """GET *url*, returning the response only for a usable 200.

        Tries at most ``MAX_RETRIES`` times; the breaker records one
        failure per call, not per attempt.
        """
        if not self.breaker.allow():
            self.logger.debug(
                "[%s] Circuit open, skipping %s", self.source_id, url
            )
            return None

        attempts = self.settings.MAX_RETRIES
        for attempt in range(1, attempts + 1):
            timeout = self._request_timeout()
            if timeout <= 0:
                self.logger.warning(
                    "[%s] Fetch budget spent, skipping %s", self.source_id, url
                )
                return None
            try:
                resp = self.session.get(url, headers=headers, timeout=timeout)
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_id,
                    attempt,
                    exc,
                    exc_info=True,
                )
            else:
                if resp.status_code != 200:
                    self._on_status(url, attempt, resp.status_code)
                else:
                    marker = blocked_marker(
                        resp.text, self.settings.CAPTCHA_KEYWORDS
                    )
                    if marker is None:
                        self.breaker.record_success()
                        self.pacer.reset()
                        return resp
                    self.logger.warning(
                        "[%s] Block page detected (marker: '%s')",
                        self.source_id,
                        marker,
                    )
                    self.pacer.escalate()
            if attempt < attempts:
                self._wait()

        self.breaker.record_failure()
        return None

    def _get_json(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> Any | None:
        """Fetch and decode a JSON document, or None on failure."""
        resp = self._fetch_get(
            url,
            headers or self._build_headers(Accept="application/json"),
        )
        if resp is None:
            return None
        try:
            return json.loads(resp.text)
        except ValueError as exc:
            self.logger.warning(
                "[%s] Invalid JSON from %s: %s", self.source_id, url, exc
            )
            return None

    def _get_page(self, url: str) -> BeautifulSoup | None:
        """Fetch an HTML page, falling back to cloudscraper on failure."""
        if not self.breaker.allow():
            return None
        headers = self._build_headers()

        resp = self._fetch_get(url, headers)
        if resp is not None:
            return BeautifulSoup(resp.text, "lxml")

        self.logger.info(
            "[%s] curl_cffi failed, falling back to cloudscraper",
            self.source_id,
        )
        timeout = self._request_timeout()
        if timeout <= 0:
            return None
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers=headers,
                timeout=timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback failed: %s",
                self.source_id,
                exc,
                exc_info=True,
            )
            return None

        if fallback_resp.status_code != 200:
            self.logger.warning(
                "[%s] cloudscraper got HTTP %d for %s",
                self.source_id,
                fallback_resp.status_code,
                url,
            )
            return None
        return BeautifulSoup(str(fallback_resp.text), "lxml")

    def fetch(self) -> list[RawListing]:
        """Fetch this catalog's records, deduplicated by link.

        Raises:
            SourceFetchError: the catalog could not be reached at all.
        """
        self._deadline = time.monotonic() + self.settings.FETCH_BUDGET
        try:
            records = self._fetch_records()
        finally:
            self._deadline = None
        unique, removed = ListingDeduplicator.deduplicate_raw(records)
        self.logger.info(
            "[%s] Fetched %d records (%d duplicates removed)",
            self.source_id,
            len(unique),
            removed,
        )
        return unique

    @abstractmethod
    def _get_homepage(self) -> str:
        """Homepage URL, sent as Referer and probed by the health check."""
        ...

    @abstractmethod
    def _fetch_records(self) -> list[RawListing]:
        """Fetch raw records from the catalog."""
        ...
