# hackagg/api/handler.py

"""Framework-agnostic request handling for the hackathons endpoint."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from hackagg.config.settings import Settings
from hackagg.models.query import Query
from hackagg.services.aggregator import HackathonAggregator

logger = logging.getLogger("hackagg.api")


@dataclass
class ApiResponse:
    """Status code, JSON body and headers for one response."""

    status_code: int
    body: dict[str, object]
    headers: dict[str, str] = field(default_factory=dict)


async def handle_hackathons(
    aggregator: HackathonAggregator | Callable[[], HackathonAggregator],
    source: str | None = None,
    keyword: str | None = None,
    min_prize: str | float | None = None,
) -> ApiResponse:
    """Resolve one hackathons request into a response envelope.

    *aggregator* may be a zero-argument factory, so that a failure to
    build the engine is reported like any other failure.  Never
    raises: anything escaping the engine becomes a 500 response with
    ``{"ok": false, "error": ...}``.
    """
    try:
        if not isinstance(aggregator, HackathonAggregator):
            aggregator = aggregator()
        query = Query.from_params(source, keyword, min_prize)
        listings = await aggregator.resolve(query)
        return ApiResponse(
            status_code=200,
            body={
                "ok": True,
                "count": len(listings),
                "data": [item.to_dict() for item in listings],
            },
            headers={"Cache-Control": Settings.RESPONSE_CACHE_CONTROL},
        )
    except Exception as exc:
        logger.error(
            "Hackathon API error: %s", exc, exc_info=True
        )
        return ApiResponse(
            status_code=500,
            body={"ok": False, "error": str(exc) or type(exc).__name__},
        )
