# hackagg/adapters/devpost_adapter.py

"""Adapter for devpost.com via its public hackathon index API."""

import math
from typing import Any

from bs4 import BeautifulSoup

from hackagg.adapters.base_adapter import BaseAdapter, SourceFetchError
from hackagg.models.listing import RawListing


class DevpostAdapter(BaseAdapter):
    """Adapter for devpost.com via its paginated JSON index.

    The index backs the devpost.com/hackathons listing page.  Prize
    amounts arrive as small HTML snippets and are reduced to text here;
    the numeric amount is left to the prize parser.
    """

    source_id = "devpost"
    base_url = "https://devpost.com"
    INDEX_API = (
        "https://devpost.com/api/hackathons"
        "?status[]=upcoming&status[]=open&page={page}"
    )

    def _get_homepage(self) -> str:
        """Return the Devpost hackathons page URL."""
        return "https://devpost.com/hackathons"

    @staticmethod
    def _html_to_text(snippet: str) -> str:
        """Strip markup from an HTML fragment."""
        if not snippet:
            return ""
        text = BeautifulSoup(snippet, "lxml").get_text()
        return " ".join(text.split())

    def _parse_item(self, item: dict[str, Any]) -> RawListing:
        """Parse a single index entry into a RawListing."""
        themes: list[dict[str, Any]] = item.get("themes") or []
        tags = [str(t.get("name", "")) for t in themes]
        period = str(item.get("submission_period_dates") or "")
        if period:
            tags.append(period)

        location: dict[str, Any] = item.get("displayed_location") or {}
        parts = [
            str(item.get("organization_name") or ""),
            str(location.get("location") or ""),
        ]
        description = ". ".join(p for p in parts if p)

        return RawListing(
            title=str(item.get("title") or ""),
            link=str(item.get("url") or ""),
            description=description,
            tags=tags,
            prize_text=self._html_to_text(
                str(item.get("prize_amount") or "")
            ),
        )

    def _fetch_records(self) -> list[RawListing]:
        """Walk the index pages until exhausted or MAX_PAGES."""
        records: list[RawListing] = []

        for page in range(1, self.settings.MAX_PAGES + 1):
            if page > 1:
                self._wait()
            data = self._get_json(self.INDEX_API.format(page=page))
            if not isinstance(data, dict):
                if page == 1:
                    raise SourceFetchError(
                        self.source_id, "hackathon index unavailable"
                    )
                self.logger.warning(
                    "[devpost] Failed page %d, keeping %d records",
                    page,
                    len(records),
                )
                break

            items: list[dict[str, Any]] = data.get("hackathons") or []
            if not items:
                break
            records.extend(self._parse_item(item) for item in items)

            meta: dict[str, Any] = data.get("meta") or {}
            per_page = int(meta.get("per_page") or len(items))
            total = int(meta.get("total_count") or 0)
            if page >= math.ceil(total / per_page):
                break

        return records
