# hackagg/cli/runner.py

"""Headless CLI runner: one-shot queries, health checks, API server."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from hackagg.config.settings import Settings
from hackagg.models.listing import Listing
from hackagg.models.query import ALL_SOURCES, Query
from hackagg.services.aggregator import HackathonAggregator

logger = logging.getLogger("hackagg.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_STATUS_STYLE = {
    "ok": "[green]OK[/green]",
    "slow": "[yellow]SLOW[/yellow]",
    "down": "[red]DOWN[/red]",
}


def validate_source(source: str) -> bool:
    """Return True for 'all' or a registered source id; report otherwise."""
    available = [s["id"] for s in Settings.AVAILABLE_SOURCES]
    if source == ALL_SOURCES or source in available:
        return True
    _err.print(f"[red]Unknown source: {source}[/red]")
    _err.print(f"[dim]Available: all, {', '.join(available)}[/dim]")
    return False


def _print_table(listings: list[Listing]) -> None:
    """Render a Rich table of listings to stdout, in result order."""
    table = Table(
        title="Hackathons",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Prize", justify="right", style="green")
    table.add_column("Tags", max_width=40)
    table.add_column("Source", style="magenta")
    table.add_column("Link", overflow="fold", style="dim")

    for idx, item in enumerate(listings, 1):
        table.add_row(
            str(idx),
            item.title[:50],
            item.prize_text or "-",
            ", ".join(item.tags) or "-",
            item.source,
            item.link,
        )

    Console().print(table)


async def cli_search(
    source: str,
    keyword: str | None,
    min_prize: str | float | None,
    output_format: str,
    aggregator: HackathonAggregator | None = None,
) -> int:
    """Run one query and return an exit code (0=ok, 1=fail)."""
    if not validate_source(source):
        return 1
    query = Query.from_params(source, keyword, min_prize)
    aggregator = aggregator or HackathonAggregator.from_settings()

    _err.print(
        f"[bold]Fetching hackathons[/bold]  "
        f"[dim]source={query.source} filter={query.keyword or '-'} "
        f"minPrize={query.min_prize}[/dim]"
    )

    try:
        listings = await aggregator.resolve(query)
    except Exception as exc:
        logger.error("CLI query failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    snapshot = aggregator.cache.current
    if snapshot is not None:
        for failed in sorted(snapshot.failed_sources):
            _err.print(f"[yellow]Source unavailable: {failed}[/yellow]")

    if not listings:
        _err.print("[yellow]No hackathons found.[/yellow]")
        return 1

    _err.print(f"[green]✓ {len(listings)} hackathons[/green]")

    if output_format == "table":
        _print_table(listings)
    else:
        json.dump(
            [item.to_dict() for item in listings],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Probe every source and print a table; exit 1 if any is down."""
    from hackagg.services.health_checker import HealthChecker

    _err.print("[bold]Probing sources...[/bold]")
    results = await HealthChecker().check_all()

    table = Table(title="Source Health", show_lines=True, title_style="bold cyan")
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    for r in results:
        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-"
        table.add_row(
            r.source_id, _STATUS_STYLE.get(r.status, r.status), latency, r.message
        )

    Console().print(table)
    return 1 if any(r.is_down for r in results) else 0


def run_server(host: str, port: int) -> int:
    """Serve the hackathons API with uvicorn until interrupted."""
    import uvicorn

    from hackagg.api.app import create_app

    _err.print(
        f"[bold]Serving[/bold] http://{host}:{port}/api/hackathons"
    )
    uvicorn.run(create_app(), host=host, port=port, log_config=None)
    return 0
