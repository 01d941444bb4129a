# hackagg/adapters/mlh_adapter.py

"""Adapter for the Major League Hacking season events page."""

from datetime import date

from bs4 import Tag

from hackagg.adapters.base_adapter import BaseAdapter, SourceFetchError
from hackagg.models.listing import RawListing


class MlhAdapter(BaseAdapter):
    """Adapter for mlh.io season event listings (HTML).

    MLH does not publish prize amounts, so ``prize_text`` stays empty.
    Event dates, location and format become tags.
    """

    source_id = "mlh"
    base_url = "https://mlh.io"
    EVENTS_URL = "https://mlh.io/seasons/{season}/events"

    def __init__(
        self,
        season: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(headers=headers)
        self.season = season or date.today().year

    def _get_homepage(self) -> str:
        """Return the MLH homepage URL."""
        return "https://mlh.io/"

    def _text(self, card: Tag, key: str) -> str:
        """Stripped text of the first element matching selector *key*."""
        selector = self.selectors.get(key, "")
        if not selector:
            return ""
        el = card.select_one(selector)
        return el.get_text(" ", strip=True) if el else ""

    def _parse_card(self, card: Tag) -> RawListing:
        """Parse a single event card into a RawListing."""
        link_el = card.select_one(self.selectors["link"])
        if link_el is None and card.name == "a":
            link_el = card
        href = str(link_el.get("href", "")) if link_el else ""

        location = ", ".join(
            part
            for part in (self._text(card, "city"), self._text(card, "state"))
            if part
        )
        tags = [
            self._text(card, "date"),
            location,
            self._text(card, "format"),
        ]

        return RawListing(
            title=self._text(card, "title"),
            link=href,
            description=f"MLH {self.season} season event",
            tags=[t for t in tags if t],
            prize_text="",
        )

    def _fetch_records(self) -> list[RawListing]:
        """Fetch and parse the season's event cards."""
        url = self.EVENTS_URL.format(season=self.season)
        self.logger.info("[mlh] Fetching %s", url)
        soup = self._get_page(url)
        if soup is None:
            raise SourceFetchError(
                self.source_id, f"events page unavailable ({url})"
            )

        cards = soup.select(self.selectors["event_card"])
        if not cards:
            cards = soup.select(self.selectors["event_card_fallback"])
        return [self._parse_card(card) for card in cards]
