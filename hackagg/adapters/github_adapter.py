# hackagg/adapters/github_adapter.py

"""Adapter for hackathon repositories found through GitHub search."""

import urllib.parse
from datetime import date, datetime, timedelta
from typing import Any

from hackagg.adapters.base_adapter import BaseAdapter, SourceFetchError
from hackagg.models.listing import RawListing


class GithubAdapter(BaseAdapter):
    """Adapter for the GitHub repository search API.

    Anonymous search is heavily rate-limited; pass a token to lift the
    limit.  The token is sent as ``Authorization: token <t>``.
    """

    source_id = "github"
    base_url = "https://github.com"
    SEARCH_API = (
        "https://api.github.com/search/repositories"
        "?q={query}&sort=updated&order=desc"
        "&per_page={per_page}&page={page}"
    )

    def __init__(
        self,
        token: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(headers=headers)
        self.token = token

    def _get_homepage(self) -> str:
        """Return the GitHub homepage URL."""
        return "https://github.com/"

    def _search_query(self) -> str:
        """URL-encoded search for recently pushed hackathon repos."""
        since = date.today() - timedelta(
            days=self.settings.GITHUB_LOOKBACK_DAYS
        )
        raw = f"hackathon in:name,description pushed:>={since.isoformat()}"
        return urllib.parse.quote(raw, safe="")

    def _api_headers(self) -> dict[str, str]:
        """Headers for the REST API, with auth when a token is set."""
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "hackathon-aggregator",
            **self.extra_headers,
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    @staticmethod
    def _parse_timestamp(value: Any) -> datetime | None:
        """Parse GitHub's ISO-8601 timestamps ('2026-10-01T12:00:00Z')."""
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None

    def _parse_item(self, item: dict[str, Any]) -> RawListing:
        """Parse a single search hit into a RawListing."""
        topics: list[Any] = item.get("topics") or []
        return RawListing(
            title=str(item.get("full_name") or ""),
            link=str(item.get("html_url") or ""),
            description=str(item.get("description") or ""),
            tags=[str(t) for t in topics],
            prize_text="",
            updated_at=self._parse_timestamp(
                item.get("pushed_at") or item.get("updated_at")
            ),
        )

    def _fetch_records(self) -> list[RawListing]:
        """Page through search results up to GITHUB_MAX_PAGES."""
        records: list[RawListing] = []
        query = self._search_query()
        per_page = self.settings.GITHUB_PER_PAGE
        headers = self._api_headers()

        for page in range(1, self.settings.GITHUB_MAX_PAGES + 1):
            if page > 1:
                self._wait()
            url = self.SEARCH_API.format(
                query=query, per_page=per_page, page=page
            )
            data = self._get_json(url, headers)
            if not isinstance(data, dict):
                if page == 1:
                    raise SourceFetchError(
                        self.source_id, "repository search failed"
                    )
                self.logger.warning(
                    "[github] Failed page %d, keeping %d records",
                    page,
                    len(records),
                )
                break

            items: list[dict[str, Any]] = data.get("items") or []
            records.extend(self._parse_item(item) for item in items)

            total = int(data.get("total_count") or 0)
            if len(items) < per_page or page * per_page >= total:
                break

        return records
