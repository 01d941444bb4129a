# hackagg/api/app.py

"""FastAPI application exposing the hackathons endpoint."""

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from hackagg.api.handler import handle_hackathons
from hackagg.services.aggregator import HackathonAggregator

router = APIRouter()


def _app_aggregator(app: FastAPI) -> HackathonAggregator:
    """The process-wide aggregator, built on first use."""
    if app.state.aggregator is None:
        app.state.aggregator = HackathonAggregator.from_settings()
    aggregator: HackathonAggregator = app.state.aggregator
    return aggregator


@router.get("/api/hackathons")
async def list_hackathons(
    request: Request,
    source: str = Query("all", description="'all' or a source id"),
    filter: str = Query("", description="Keyword filter"),
    min_prize: str = Query(
        "0", alias="minPrize", description="Minimum parsed prize"
    ),
) -> JSONResponse:
    """Merged hackathon listings, optionally filtered.

    ``minPrize`` is read as text so that malformed values fall back to
    no prize filter instead of a validation error.
    """
    response = await handle_hackathons(
        lambda: _app_aggregator(request.app), source, filter, min_prize
    )
    return JSONResponse(
        status_code=response.status_code,
        content=response.body,
        headers=response.headers,
    )


def create_app(aggregator: HackathonAggregator | None = None) -> FastAPI:
    """Build the app around one process-wide aggregator."""
    app = FastAPI(title="Hackathon Aggregator")
    app.state.aggregator = aggregator
    app.include_router(router)
    return app
