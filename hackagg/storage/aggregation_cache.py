# hackagg/storage/aggregation_cache.py

"""Time-bounded, single-flight cache of the merged source snapshot."""

import asyncio
import functools
import inspect
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from hackagg.config.settings import Settings
from hackagg.filters.deduplicator import ListingDeduplicator
from hackagg.filters.normalizer import ListingNormalizer
from hackagg.models.listing import Listing
from hackagg.models.snapshot import Snapshot

logger = logging.getLogger("hackagg.cache")


def _describe(exc: BaseException) -> str:
    """Readable one-line description of an adapter failure."""
    if isinstance(exc, asyncio.TimeoutError):
        return "timed out"
    return str(exc) or type(exc).__name__


class AggregationCache:
    """Owns the current Snapshot and bounds calls into the adapters.

    A read returns the current Snapshot while it is younger than the
    TTL.  Otherwise one refresh cycle runs every adapter concurrently,
    settles all of them, and installs a new Snapshot.  Callers that
    arrive while a refresh is running await that same refresh.

    Adapters need ``source_id``, ``base_url`` and a ``fetch()`` method
    returning raw records; a blocking ``fetch`` runs in a worker
    thread, a coroutine ``fetch`` is awaited directly.
    """

    def __init__(
        self,
        adapters: Sequence[Any],
        clock: Callable[[], float] = time.monotonic,
        ttl: float | None = None,
        adapter_timeout: float | None = None,
    ) -> None:
        ids = [a.source_id for a in adapters]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate source ids: {ids}")
        self._adapters: list[Any] = list(adapters)
        self._clock = clock
        self._ttl: float = (
            Settings.CACHE_TTL if ttl is None else ttl
        )
        self._adapter_timeout: float = (
            Settings.ADAPTER_TIMEOUT
            if adapter_timeout is None
            else adapter_timeout
        )
        self._current: Snapshot | None = None
        self._inflight: asyncio.Task[Snapshot] | None = None
        # Blocking fetches still running in a worker thread, by source id
        self._running: dict[str, asyncio.Future[list[Any]]] = {}
        self.refresh_count: int = 0

    @property
    def source_ids(self) -> tuple[str, ...]:
        """Configured source order."""
        return tuple(a.source_id for a in self._adapters)

    @property
    def current(self) -> Snapshot | None:
        """The installed Snapshot, if any (never triggers a refresh)."""
        return self._current

    @property
    def last_refreshed(self) -> float | None:
        """Clock value at which the current Snapshot was captured."""
        return self._current.captured_at if self._current else None

    def is_fresh(self, ttl: float | None = None) -> bool:
        """Return True if a Snapshot exists and is within *ttl*."""
        if self._current is None:
            return False
        limit = self._ttl if ttl is None else ttl
        return self._clock() - self._current.captured_at <= limit

    async def get_snapshot(self, ttl: float | None = None) -> Snapshot:
        """Return the current Snapshot, refreshing it once it is stale."""
        current = self._current
        if current is not None and self.is_fresh(ttl):
            return current

        # Check-and-set with no await in between: only one task per loop.
        if self._inflight is None:
            logger.info(
                "Snapshot %s, starting refresh",
                "missing" if current is None else "stale",
            )
            self._inflight = asyncio.create_task(self._refresh())
        else:
            logger.debug("Joining in-flight refresh")
        return await asyncio.shield(self._inflight)

    def invalidate(self) -> None:
        """Drop the current Snapshot so the next read refreshes."""
        if self._current is not None:
            logger.info("Snapshot invalidated")
        self._current = None

    async def _fetch_one(self, adapter: Any) -> list[Any]:
        """Run one adapter fetch under the adapter timeout.

        A coroutine fetch is cancelled when it times out.  A thread
        cannot be, so a timed-out blocking fetch stays registered until
        it returns and the next refresh joins it instead of calling
        ``fetch()`` a second time on the same adapter.
        """
        if inspect.iscoroutinefunction(adapter.fetch):
            coro_records: list[Any] = await asyncio.wait_for(
                adapter.fetch(), timeout=self._adapter_timeout
            )
            return coro_records

        source_id: str = adapter.source_id
        job = self._running.get(source_id)
        if job is None or job.done():
            job = asyncio.ensure_future(asyncio.to_thread(adapter.fetch))
            self._running[source_id] = job
            job.add_done_callback(
                functools.partial(self._release, source_id)
            )
        else:
            logger.warning(
                "Adapter %s still busy with an earlier fetch, joining it",
                source_id,
            )
        records: list[Any] = await asyncio.wait_for(
            asyncio.shield(job), timeout=self._adapter_timeout
        )
        return records

    def _release(
        self, source_id: str, job: "asyncio.Future[list[Any]]"
    ) -> None:
        if self._running.get(source_id) is job:
            del self._running[source_id]

    async def _refresh(self) -> Snapshot:
        """Fetch every source, settle all, and install a new Snapshot."""
        try:
            outcomes = await asyncio.gather(
                *(self._fetch_one(a) for a in self._adapters),
                return_exceptions=True,
            )
            snapshot = self._merge(outcomes)
            self._current = snapshot
            self.refresh_count += 1
            logger.info(
                "Snapshot refreshed: %d listings from %d sources "
                "(%d failed, %d dropped)",
                len(snapshot),
                len(self._adapters),
                len(snapshot.failed_sources),
                snapshot.dropped_count,
            )
            return snapshot
        finally:
            self._inflight = None

    def _merge(self, outcomes: Sequence[Any]) -> Snapshot:
        """Normalize and dedup each successful batch, in source order."""
        listings: dict[str, tuple[Listing, ...]] = {}
        failed: set[str] = set()
        dropped = 0
        seen_links: set[str] = set()

        for adapter, outcome in zip(self._adapters, outcomes):
            source_id: str = adapter.source_id
            if isinstance(outcome, BaseException):
                failed.add(source_id)
                listings[source_id] = ()
                logger.error(
                    "Adapter %s failed: %s",
                    source_id,
                    _describe(outcome),
                    exc_info=outcome,
                )
                continue

            normalized, invalid = ListingNormalizer.normalize_batch(
                list(outcome or []), source_id, adapter.base_url
            )
            unique, dupes = ListingDeduplicator.deduplicate(
                normalized, seen_links
            )
            listings[source_id] = tuple(unique)
            dropped += invalid + dupes

        return Snapshot(
            listings=listings,
            captured_at=self._clock(),
            failed_sources=frozenset(failed),
            dropped_count=dropped,
        )
