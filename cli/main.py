"""nerdscrape CLI: entry-point for scraping and browsing stored results.

Usage:
    nerdscrape --help

Command groups:
    scrape    run the pipeline against one URL
    history   browse stored scrape records
    db        database maintenance
    serve     start the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from nerdscrape.xxx import
# ...` works when the CLI is invoked as `python cli/main.py`.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
import sqlite3
from typing import Optional

import typer

from nerdscrape.config import settings
from nerdscrape.db import get_connection, init_db
from nerdscrape.errors import InvalidInputError
from nerdscrape.log import configure_logging
from nerdscrape.pipeline.models import BASIC, ScrapeRequest
from nerdscrape.pipeline.runner import run_scrape

from cli.commands.history import history_app
from cli.rendering import render_record

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="nerdscrape",
    help="Single-page web scraper with optional AI analysis.",
    no_args_is_help=True,
)
app.add_typer(history_app, name="history")

db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# Scrape
# ---------------------------------------------------------------------------
def _open_store() -> Optional[sqlite3.Connection]:
    """Return an initialised connection, or ``None`` if the store is unusable."""
    try:
        conn = get_connection()
    except (sqlite3.Error, OSError) as exc:
        logger.error("Opening the store failed: %s", exc)
        return None
    try:
        init_db(conn)
    except sqlite3.Error as exc:
        logger.error("Store initialisation failed: %s", exc)
        conn.close()
        return None
    return conn


@app.command("scrape")
def scrape(
    url: str = typer.Argument(..., help="URL to scrape."),
    mode: str = typer.Option(BASIC, "--mode", help="basic | nerd (nerd adds AI analysis)."),
    prompt: Optional[str] = typer.Option(None, "--prompt", help="Custom AI analysis prompt."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON record."),
) -> None:
    """Scrape URL, store the result, and print it."""
    conn = _open_store()
    try:
        response = run_scrape(conn, ScrapeRequest(url=url, mode=mode, custom_prompt=prompt))
    except InvalidInputError as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(code=1)
    finally:
        if conn is not None:
            conn.close()

    record = response.result.to_dict()
    typer.echo(json.dumps(record, indent=2) if as_json else render_record(record))
    if not response.persistence.durable:
        typer.echo(f"⚠️  Result not saved to {settings.db_path}", err=True)
    if not response.ok:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("nerdscrape.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
