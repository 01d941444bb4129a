# hackagg/filters/query_engine.py

"""Keyword and prize filtering of a merged snapshot."""

import logging

from hackagg.filters.prize_parser import parse_prize
from hackagg.models.listing import Listing
from hackagg.models.query import ALL_SOURCES, Query
from hackagg.models.snapshot import Snapshot

logger = logging.getLogger("hackagg.filters")

# Keywords that match any of several phrases instead of only themselves
_KEYWORD_ALIASES: dict[str, tuple[str, ...]] = {
    "ai": ("ai", "machine learning"),
    "student": ("student",),
}


class QueryEngine:
    """Apply a Query to a Snapshot, preserving source order."""

    @staticmethod
    def select_sources(
        snapshot: Snapshot, source: str,
    ) -> list[Listing]:
        """Listings of the selected source, or every source for 'all'."""
        if source == ALL_SOURCES:
            return snapshot.all_listings()
        return list(snapshot.for_source(source))

    @staticmethod
    def haystack(listing: Listing) -> str:
        """Lowercased searchable text of a listing."""
        return " ".join(
            (listing.title, listing.description, " ".join(listing.tags))
        ).lower()

    @staticmethod
    def matches_keyword(listing: Listing, keyword: str) -> bool:
        """Return True if *listing* matches *keyword* (case-insensitive)."""
        needle = keyword.lower()
        phrases = _KEYWORD_ALIASES.get(needle, (needle,))
        text = QueryEngine.haystack(listing)
        return any(phrase in text for phrase in phrases)

    @staticmethod
    def filter_by_keyword(
        listings: list[Listing], keyword: str,
    ) -> list[Listing]:
        """Keep listings matching *keyword*; no-op for an empty keyword."""
        if not keyword:
            return listings
        return [
            item
            for item in listings
            if QueryEngine.matches_keyword(item, keyword)
        ]

    @staticmethod
    def filter_by_prize(
        listings: list[Listing], min_prize: int,
    ) -> list[Listing]:
        """Keep listings whose parsed prize reaches *min_prize*."""
        if min_prize <= 0:
            return listings
        return [
            item
            for item in listings
            if parse_prize(item.prize_text) >= min_prize
        ]

    @staticmethod
    def apply(snapshot: Snapshot, query: Query) -> list[Listing]:
        """Return the listings of *snapshot* that satisfy *query*."""
        selected = QueryEngine.select_sources(snapshot, query.source)
        kept = QueryEngine.filter_by_keyword(selected, query.keyword)
        kept = QueryEngine.filter_by_prize(kept, query.min_prize)

        logger.debug(
            "Query source=%s keyword=%r min_prize=%d kept %d of %d",
            query.source,
            query.keyword,
            query.min_prize,
            len(kept),
            len(selected),
        )
        return kept
