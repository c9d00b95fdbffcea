"""linkcard CLI — entry-point for running the extraction engine by hand.

Usage:
    python cli/main.py --help

Commands:
    scrape    → fetch a URL and print its project-card summary
    serve     → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkcard.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging

import typer

from linkcard.config import settings

app = typer.Typer(
    name="linkcard",
    help="Summarise a web page as a project card.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging for every sub-command."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to summarise."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Fetch a URL and print its title, description, image, favicon and stack."""
    from linkcard.scraper import ExtractionError, extract_metadata

    if not as_json:
        typer.echo(f"[scrape] Fetching {url!r} …")
    try:
        result = extract_metadata(url)
    except ExtractionError as exc:
        typer.echo(f"[scrape] Error ({exc.reason}): {exc.message}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"[scrape] Title        : {result.title or '(none)'}")
    typer.echo(f"[scrape] Description  : {result.description or '(none)'}")
    typer.echo(f"[scrape] Image        : {result.image_url or '(none)'}")
    typer.echo(f"[scrape] Favicon      : {result.favicon or '(none)'}")
    typer.echo(f"[scrape] Technologies : {', '.join(result.technologies) or '(none)'}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
) -> None:
    """Run the HTTP API (POST /scrape)."""
    import uvicorn

    uvicorn.run("linkcard.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
