# main.py

"""Entry point for the hackathon aggregator (one-shot query, API, health)."""

import argparse
import asyncio
import logging
import sys

from hackagg.config.logging_config import setup_logging
from hackagg.config.settings import Settings

logger = logging.getLogger("hackagg.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="hackagg",
        description="Hackathon listings merged from several catalogs.",
        epilog=f"Available sources: all, {valid_ids}",
    )
    parser.add_argument(
        "-s",
        "--source",
        default="all",
        help="Source ID to query (default: all).",
    )
    parser.add_argument(
        "-k",
        "--filter",
        default="",
        dest="keyword",
        help="Keyword filter ('ai' also matches machine learning).",
    )
    parser.add_argument(
        "-p",
        "--min-prize",
        default="0",
        dest="min_prize",
        help="Minimum prize amount, e.g. 5000 (default: 0).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Serve the HTTP API instead of running one query.",
    )
    parser.add_argument(
        "--host",
        default=Settings.API_HOST,
        help=f"API bind host (default: {Settings.API_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=Settings.API_PORT,
        help=f"API bind port (default: {Settings.API_PORT}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Also log INFO messages to stderr.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all sources.",
    )
    return parser


def _run_query(args: argparse.Namespace) -> None:
    """Run one headless query and exit."""
    from hackagg.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            source=args.source,
            keyword=args.keyword,
            min_prize=args.min_prize,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_server(args: argparse.Namespace) -> None:
    """Serve the HTTP API."""
    from hackagg.cli.runner import run_server

    try:
        exit_code = run_server(args.host, args.port)
    except Exception:
        logger.critical("Fatal error while serving", exc_info=True)
        raise
    finally:
        logger.info("hackagg API shutting down")
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run source connectivity health check."""
    from hackagg.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to a query, the API server, or the health check."""
    args = _build_parser().parse_args()
    log_file = setup_logging(
        logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("hackagg starting, log file: %s", log_file)

    if args.health:
        _run_health_check()
    elif args.serve:
        _run_server(args)
    else:
        _run_query(args)


if __name__ == "__main__":
    main()
