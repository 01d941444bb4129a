# hackagg/services/aggregator.py

"""Engine facade: cached snapshot in, filtered listings out."""

import logging

from hackagg.filters.query_engine import QueryEngine
from hackagg.models.listing import Listing
from hackagg.models.query import Query
from hackagg.models.snapshot import Snapshot
from hackagg.services.registry import build_adapters
from hackagg.storage.aggregation_cache import AggregationCache

logger = logging.getLogger("hackagg.aggregator")


class HackathonAggregator:
    """Single entry point for external collaborators (API, CLI).

    Holds no per-query state; everything mutable lives in the
    :class:`AggregationCache` it is given.
    """

    def __init__(
        self,
        cache: AggregationCache,
        ttl: float | None = None,
    ) -> None:
        self.cache = cache
        self.ttl = ttl

    @classmethod
    def from_settings(
        cls,
        source_ids: list[str] | None = None,
        ttl: float | None = None,
    ) -> "HackathonAggregator":
        """Build an aggregator over the registered source adapters."""
        return cls(AggregationCache(build_adapters(source_ids)), ttl=ttl)

    @property
    def source_ids(self) -> tuple[str, ...]:
        """Configured source order."""
        return self.cache.source_ids

    async def resolve(
        self,
        query: Query,
        ttl: float | None = None,
    ) -> list[Listing]:
        """Return the listings matching *query* from a fresh-enough snapshot."""
        snapshot = await self.cache.get_snapshot(
            self.ttl if ttl is None else ttl
        )
        return QueryEngine.apply(snapshot, query)

    async def refresh(self) -> Snapshot:
        """Discard the cached snapshot and rebuild it now."""
        logger.info("Explicit refresh requested")
        self.cache.invalidate()
        return await self.cache.get_snapshot()
