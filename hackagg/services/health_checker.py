# hackagg/services/health_checker.py

"""Source connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from hackagg.config.settings import Settings
from hackagg.services.registry import build_adapter, resolve_sources

logger = logging.getLogger("hackagg.health")

STATUS_OK = "ok"
STATUS_SLOW = "slow"
STATUS_DOWN = "down"


@dataclass
class HealthResult:
    """Outcome of probing one catalog's homepage."""

    source_id: str
    status: str
    latency_ms: float = 0.0
    message: str = ""

    @property
    def is_down(self) -> bool:
        return self.status == STATUS_DOWN


def _classify(status_code: int, elapsed_ms: float) -> tuple[str, str]:
    if status_code != 200:
        return STATUS_DOWN, f"HTTP {status_code}"
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return STATUS_SLOW, "High latency"
    return STATUS_OK, ""


def probe_source(source: dict[str, str]) -> HealthResult:
    """GET the homepage of one registered source and time it.

    Never raises: adapter construction and transport errors are
    reported as ``down``.
    """
    source_id = source["id"]
    try:
        adapter = build_adapter(source)
    except Exception as exc:
        logger.warning("Cannot build adapter %s: %s", source_id, exc)
        return HealthResult(
            source_id, STATUS_DOWN, message=f"Failed to load adapter: {exc}"
        )

    start = time.monotonic()
    try:
        resp = adapter.session.get(
            adapter._get_homepage(),
            headers=adapter._build_headers(),
            timeout=Settings.HEALTH_TIMEOUT,
        )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id, STATUS_DOWN, elapsed_ms, str(exc)[:80]
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    status, message = _classify(resp.status_code, elapsed_ms)
    return HealthResult(source_id, status, elapsed_ms, message)


class HealthChecker:
    """Probes the selected sources concurrently, one thread each."""

    def __init__(self, source_ids: list[str] | None = None) -> None:
        self.sources = resolve_sources(source_ids)

    async def check_all(self) -> list[HealthResult]:
        """Results in registry order."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(asyncio.to_thread(probe_source, src) for src in self.sources)
            )
        )
        for r in results:
            log = logger.warning if r.is_down else logger.info
            log(
                "Health %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
