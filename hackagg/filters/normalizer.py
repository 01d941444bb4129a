# hackagg/filters/normalizer.py

"""Normalization of adapter records into canonical listings."""

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urldefrag, urljoin, urlparse

from hackagg.models.listing import UNTITLED, Listing, RawListing

logger = logging.getLogger("hackagg.filters")


class ListingNormalizer:
    """Map raw adapter records onto the canonical Listing schema."""

    @staticmethod
    def resolve_link(link: str, base_url: str) -> str:
        """Resolve *link* against *base_url* and drop any fragment.

        Returns an empty string when the result is not an absolute
        http(s) URL.
        """
        link = (link or "").strip()
        if not link:
            return ""
        absolute, _fragment = urldefrag(urljoin(base_url, link))
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return ""
        return absolute

    @staticmethod
    def normalize(
        raw: RawListing | Mapping[str, Any],
        source_id: str,
        base_url: str,
    ) -> Listing | None:
        """Build a Listing, or return None when no valid link exists."""
        if not isinstance(raw, RawListing):
            raw = RawListing.from_mapping(raw)
        link = ListingNormalizer.resolve_link(raw.link, base_url)
        if not link:
            return None
        title = " ".join((raw.title or "").split())
        tags = tuple(
            " ".join(t.split()) for t in raw.tags if t and t.strip()
        )
        return Listing(
            source=source_id,
            title=title or UNTITLED,
            link=link,
            description=(raw.description or "").strip(),
            tags=tags,
            prize_text=(raw.prize_text or "").strip(),
        )

    @staticmethod
    def normalize_batch(
        records: list[RawListing] | list[Mapping[str, Any]],
        source_id: str,
        base_url: str,
    ) -> tuple[list[Listing], int]:
        """Normalize a whole adapter batch.

        Returns the listings and the count of dropped records.
        """
        listings: list[Listing] = []
        dropped = 0

        for record in records:
            raw = (
                record
                if isinstance(record, RawListing)
                else RawListing.from_mapping(record)
            )
            listing = ListingNormalizer.normalize(
                raw, source_id, base_url
            )
            if listing is None:
                logger.debug(
                    "Dropped record without a usable link "
                    "(source=%s, title=%s, link=%r)",
                    source_id,
                    raw.title,
                    raw.link,
                )
                dropped += 1
                continue
            listings.append(listing)

        if dropped:
            logger.info(
                "Normalization dropped %d %s records",
                dropped,
                source_id,
            )

        return listings, dropped
