# hackagg/models/listing.py

"""Listing data models for adapter output and the canonical schema."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hackagg.filters.prize_parser import parse_prize

UNTITLED = "Untitled"


@dataclass
class RawListing:
    """A record as an adapter shaped it, before normalization."""

    title: str = ""
    link: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=lambda: list[str]())
    prize_text: str = ""
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawListing":
        """Build from a plain dict using wire (camelCase) or model keys."""
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        updated = data.get("updated_at")
        return cls(
            title=str(data.get("title") or ""),
            link=str(data.get("link") or ""),
            description=str(data.get("description") or ""),
            tags=[str(t) for t in tags],
            prize_text=str(
                data.get("prizeText") or data.get("prize_text") or ""
            ),
            updated_at=updated if isinstance(updated, datetime) else None,
        )


@dataclass(frozen=True)
class Listing:
    """One normalized hackathon listing from a given source."""

    source: str
    title: str
    link: str
    description: str = ""
    tags: tuple[str, ...] = ()
    prize_text: str = ""

    @property
    def prize_amount(self) -> int:
        """Best-effort numeric prize, derived from ``prize_text``."""
        return parse_prize(self.prize_text)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the JSON wire shape."""
        return {
            "source": self.source,
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "tags": list(self.tags),
            "prizeText": self.prize_text,
        }
