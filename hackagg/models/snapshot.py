# hackagg/models/snapshot.py

"""Immutable, timestamped merge of every source's listings."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from hackagg.models.listing import Listing


@dataclass(frozen=True)
class Snapshot:
    """Listings per source, as of one refresh cycle.

    ``listings`` preserves the configured source order.  The mapping is
    wrapped read-only on construction; a refresh builds a new Snapshot
    instead of touching an existing one.
    """

    listings: Mapping[str, tuple[Listing, ...]]
    captured_at: float
    failed_sources: frozenset[str] = frozenset()
    dropped_count: int = 0

    def __post_init__(self) -> None:
        frozen = MappingProxyType(
            {src: tuple(items) for src, items in self.listings.items()}
        )
        object.__setattr__(self, "listings", frozen)

    @property
    def source_ids(self) -> tuple[str, ...]:
        """Source identifiers in configured order."""
        return tuple(self.listings)

    def for_source(self, source_id: str) -> tuple[Listing, ...]:
        """Listings of one source (empty for unknown ids)."""
        return self.listings.get(source_id, ())

    def all_listings(self) -> list[Listing]:
        """Every listing, sources concatenated in configured order."""
        merged: list[Listing] = []
        for items in self.listings.values():
            merged.extend(items)
        return merged

    def __len__(self) -> int:
        return sum(len(items) for items in self.listings.values())
