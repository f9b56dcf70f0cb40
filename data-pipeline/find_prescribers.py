#!/usr/bin/env python3
"""
Look up prescribers in a published prescribers.json.

Runs the same filters as the map page: zip + radius, state, and name search.

Usage:
    uv run python find_prescribers.py --zip 94110 --radius 25
    uv run python find_prescribers.py --state California --zip 94110 --radius 50
    uv run python find_prescribers.py --name smith
    uv run python find_prescribers.py --data https://example.org/prescribers.json --state TX
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console
from rich.table import Table

from prescriber_map.config import get_public_output_path, load_environment
from prescriber_map.constants import DEFAULT_RADIUS_MILES, RADIUS_OPTIONS
from prescriber_map.errors import DatasetLoadError, InvalidZipError, ZipNotFoundError
from prescriber_map.search import LOAD_ERROR_BANNER, SearchSession, info_banner, load_dataset
from prescriber_map.utils.logger import PipelineLogger

console = Console()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search the prescriber dataset")
    parser.add_argument("--data", type=str, default=None, help="Path or URL of prescribers.json")
    parser.add_argument("--zip", type=str, default=None, help="Patient 5-digit zip code")
    parser.add_argument(
        "--radius",
        type=int,
        choices=RADIUS_OPTIONS,
        default=DEFAULT_RADIUS_MILES,
        help=f"Search radius in miles (default: {DEFAULT_RADIUS_MILES})",
    )
    parser.add_argument("--state", type=str, default=None, help="State name or 2-letter code")
    parser.add_argument("--name", type=str, default=None, help="Name search (min 2 characters)")
    parser.add_argument("--list-states", action="store_true", help="List states present in the dataset")
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    return parser.parse_args(argv)


def render_results(session: SearchSession):
    view = session.list_view()
    table = Table(title=session.result_count() or "All prescribers")
    table.add_column("Name", style="bold")
    table.add_column("Specialty")
    table.add_column("Practice")
    table.add_column("Distance", justify="right")

    for card in view.cards:
        table.add_row(card.title, card.specialty or "", card.subtitle, card.distance_text or "")

    console.print(table)
    console.print(f"[dim]{view.count_text}[/dim]")
    if view.note:
        console.print(f"[dim]{view.note}[/dim]")


def main(argv=None) -> int:
    args = parse_args(argv)
    load_environment()
    logger = PipelineLogger("prescriber_lookup", log_level="DEBUG" if args.verbose else "WARNING", phase="Lookup")

    source = args.data or get_public_output_path()
    try:
        dataset = load_dataset(source)
    except DatasetLoadError as e:
        logger.error("Failed to load dataset", exception=e)
        console.print(f"[red]{LOAD_ERROR_BANNER}[/red]")
        return 1

    console.print(info_banner(dataset))
    session = SearchSession(dataset.prescribers, logger=logger)

    if args.list_states:
        console.print(", ".join(session.states) or "(no recognized states)")
        return 0

    if args.name:
        matches = session.suggest(args.name)
        if not matches:
            console.print("[yellow]No prescribers match that name[/yellow]")
            return 0
        if len(matches) > 1:
            for record in matches:
                console.print(f"  {record.name} [dim](id {record.id})[/dim]")
            return 0
        session.select(matches[0].id)
    else:
        if args.state:
            session.filter_state(args.state)
        if args.zip:
            try:
                session.search_zip(args.zip, args.radius)
            except (InvalidZipError, ZipNotFoundError) as e:
                console.print(f"[red]{e}[/red]")
                return 1

    render_results(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
