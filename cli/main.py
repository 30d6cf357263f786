"""Sensor feed CLI — run the scraping pipeline from a terminal.

Usage:
    python cli/main.py --help

Commands:
    snapshot  → fetch the dashboard once and print the formatted snapshot
    inspect   → fetch a page and list the elements the pattern pass will see
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from sensorfeed.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from dataclasses import replace
from typing import Optional

import typer

from cli.rendering import render_candidates, render_snapshot
from sensorfeed.config import settings
from sensorfeed.errors import FetchError
from sensorfeed.logs import configure_logging
from sensorfeed.scraper.fetcher import fetch_rendered_page
from sensorfeed.sensors.candidates import select_candidates
from sensorfeed.sensors.formatter import SHAPES
from sensorfeed.sensors.service import SensorService

app = typer.Typer(
    name="sensorfeed",
    help="Environmental dashboard scraper CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline details."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging("DEBUG" if verbose else settings.log_level)


# ---------------------------------------------------------------------------
# snapshot
# ---------------------------------------------------------------------------
@app.command("snapshot")
def snapshot(
    url: Optional[str] = typer.Option(None, help="Dashboard URL (defaults to SENSOR_TARGET_URL)."),
    shape: Optional[str] = typer.Option(None, help="Output shape: flat | categorized."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON envelope."),
) -> None:
    """Fetch the dashboard once and print the sensor snapshot."""
    if shape is not None and shape not in SHAPES:
        typer.echo(f"[snapshot] Unknown shape {shape!r}. Use: flat | categorized")
        raise typer.Exit(1)

    config = replace(
        settings,
        target_url=url or settings.target_url,
        output_shape=shape or settings.output_shape,
    )
    service = SensorService(config)

    typer.echo(f"[snapshot] Fetching {config.target_url!r} …", err=True)
    result = service.fetch_sensor_snapshot()

    if as_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        typer.echo(render_snapshot(result))

    if result.get("status") == "error":
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------
@app.command("inspect")
def inspect(
    url: Optional[str] = typer.Option(None, help="Page URL (defaults to SENSOR_TARGET_URL)."),
    max_length: int = typer.Option(
        settings.candidate_max_length, help="Candidate text length ceiling."
    ),
) -> None:
    """Fetch a page and list its candidate elements and the sensors they mention."""
    target = url or settings.target_url
    typer.echo(f"[inspect] Fetching {target!r} …")
    try:
        page = fetch_rendered_page(target, settings.request_timeout)
    except FetchError as exc:
        typer.echo(f"[inspect] Fetch failed: {exc}")
        raise typer.Exit(1)

    candidates = select_candidates(page, max_length)
    typer.echo(f"[inspect] Title      : {page.title or '(none)'}")
    typer.echo(f"[inspect] Elements   : {len(page.visible_elements)}")
    typer.echo(f"[inspect] Candidates : {len(candidates)}")
    typer.echo("")
    typer.echo(render_candidates(candidates))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
