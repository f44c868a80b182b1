"""CLI: look up a historical storm track and print its enriched points."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError, StormLookupError
from .log_setup import setup_logger
from .narrative.models import EnrichmentResult
from .service import StormTrackService
from .tracks.models import StormIndexEntry


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse storm lookup CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Find a named storm in the IBTrACS and best-track sources."
    )
    parser.add_argument("name", nargs="?", default=None, help="Storm name, e.g. KATRINA.")
    parser.add_argument("year", nargs="?", default=None, help="Optional season year.")
    parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Skip the narrative service and keep the seed descriptions.",
    )
    parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of track points to print.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List storms available in the configured sources and exit.",
    )
    return parser.parse_args(argv)


def _validate_cli_input(args: argparse.Namespace) -> None:
    if args.max_print is not None and args.max_print <= 0:
        raise StormLookupError("--max-print must be > 0 when provided.")
    if not args.list and not (args.name or "").strip():
        raise StormLookupError("Please provide a storm name.")


def _print_result(console: Console, result: EnrichmentResult, max_print: int) -> None:
    storm = result.storm
    console.print(f"{storm.emoji} {storm.name} ({storm.id}) points={len(storm.points)}")
    if result.reason == "configuration_missing":
        console.print(
            "[yellow]GROQ_API_KEY is not configured; showing generated seed descriptions.[/yellow]"
        )
    elif not result.enriched and result.reason != "disabled":
        console.print(f"[yellow]Narrative enrichment unavailable ({result.reason}).[/yellow]")

    table = Table(title=f"{storm.name} Track")
    table.add_column("#")
    table.add_column("Label", overflow="fold")
    table.add_column("Time")
    table.add_column("Lat")
    table.add_column("Lng")
    table.add_column("Cat")
    table.add_column("Wind mph")
    table.add_column("Pres mb")
    table.add_column("Description", overflow="fold")

    for index, point in enumerate(storm.points[:max_print]):
        table.add_row(
            str(index + 1),
            point.name,
            point.timestamp,
            f"{point.lat:.1f}",
            f"{point.lng:.1f}",
            str(point.category),
            f"{point.wind_speed:.0f}",
            f"{point.pressure:g}",
            point.description,
        )
    console.print(table)


def _print_index(console: Console, entries: list[StormIndexEntry]) -> None:
    if not entries:
        console.print("No storms found in the configured sources.")
        return
    table = Table(title="Available Storms")
    table.add_column("Name")
    table.add_column("Year")
    table.add_column("Source")
    for entry in entries:
        table.add_row(entry.name, entry.year, entry.source)
    console.print(table)


async def _run(
    args: argparse.Namespace, settings: Settings, console: Console, logger: logging.Logger
) -> None:
    async with StormTrackService.open(settings, logger) as service:
        if args.list:
            _print_index(console, await service.available_storms())
            return
        result = await service.track_with_result(
            args.name, args.year, enrich=not args.no_enrich
        )
        _print_result(console, result, args.max_print or settings.storm_max_print)


def main(argv: list[str] | None = None) -> int:
    """Run a storm lookup."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger.info("Storm lookup starting: %s", settings.safe_summary())
    try:
        _validate_cli_input(args)
        asyncio.run(_run(args, settings, console, logger))
    except StormLookupError as exc:
        logger.error("Storm lookup failure: %s", exc)
        console.print(f"[red]{exc}[/red]")
        return 4
    except Exception as exc:  # pragma: no cover - defensive catch for CLI runtime
        logger.exception("Unexpected storm CLI failure: %s", exc)
        return 99
    return 0


if __name__ == "__main__":
    sys.exit(main())
