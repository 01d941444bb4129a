# hackagg/filters/deduplicator.py

"""Link-based deduplication of raw records and normalized listings."""

import logging
from urllib.parse import urldefrag, urlsplit, urlunsplit

from hackagg.models.listing import Listing, RawListing

logger = logging.getLogger("hackagg.filters")


class ListingDeduplicator:
    """Collapse records that point at the same link."""

    @staticmethod
    def link_key(link: str) -> str:
        """Comparison key for a link: only exact duplicates share a key.

        Scheme and host are case-insensitive and are lowercased; path
        and query are kept as-is.  The fragment is dropped here because
        raw records are deduplicated before the normalizer has
        resolved their links.
        """
        cleaned = urldefrag(link.strip()).url if link else ""
        if not cleaned:
            return ""
        parts = urlsplit(cleaned)
        return urlunsplit(
            parts._replace(
                scheme=parts.scheme.lower(), netloc=parts.netloc.lower()
            )
        )

    @staticmethod
    def deduplicate_raw(
        records: list[RawListing],
    ) -> tuple[list[RawListing], int]:
        """Remove duplicate records from one adapter batch.

        The first occurrence keeps its position.  When both duplicates
        report ``updated_at``, the more recently updated record's
        content takes that position.  Records without a link pass
        through; the normalizer drops them.

        Returns the deduplicated list and the count of removed dupes.
        """
        seen: dict[str, int] = {}
        kept: list[RawListing] = []
        removed = 0

        for record in records:
            key = ListingDeduplicator.link_key(record.link)
            if key and key in seen:
                existing = kept[seen[key]]
                if (
                    record.updated_at is not None
                    and existing.updated_at is not None
                    and record.updated_at > existing.updated_at
                ):
                    kept[seen[key]] = record
                removed += 1
                continue
            if key:
                seen[key] = len(kept)
            kept.append(record)

        if removed:
            logger.debug(
                "Raw deduplication removed %d duplicate records",
                removed,
            )

        return kept, removed

    @staticmethod
    def deduplicate(
        listings: list[Listing],
        seen: set[str] | None = None,
    ) -> tuple[list[Listing], int]:
        """Remove listings whose link was already seen, first seen wins.

        Pass the same *seen* set across sources to enforce link
        uniqueness over a whole snapshot; it is updated in place.

        Returns the deduplicated list and the count of removed dupes.
        """
        if seen is None:
            seen = set()
        kept: list[Listing] = []
        removed = 0

        for listing in listings:
            key = ListingDeduplicator.link_key(listing.link)
            if key in seen:
                removed += 1
                continue
            seen.add(key)
            kept.append(listing)

        if removed:
            logger.info(
                "Deduplication removed %d duplicate listings",
                removed,
            )

        return kept, removed
