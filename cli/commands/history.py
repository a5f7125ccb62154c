"""History commands for browsing stored scrape records."""

from __future__ import annotations

import json
from typing import Optional

import typer

from nerdscrape.db import get_connection, init_db
from nerdscrape.db.scrapes import get_scrape, list_scrapes

from cli.rendering import render_record, render_row_summary

history_app = typer.Typer(help="Browse stored scrape records.", no_args_is_help=True)


@history_app.command("list")
def history_list(
    status: Optional[str] = typer.Option(None, "--status", help="Filter: success | error."),
    limit: int = typer.Option(20, "--limit", help="Maximum records to show."),
) -> None:
    """List stored scrapes, newest first."""
    conn = get_connection()
    init_db(conn)
    try:
        rows = list_scrapes(conn, status=status, limit=limit)
    finally:
        conn.close()

    if not rows:
        typer.echo("No scrapes found.")
        return
    for row in rows:
        typer.echo(render_row_summary(row.as_record()))


@history_app.command("show")
def history_show(
    scrape_id: str = typer.Argument(..., help="Id of a stored scrape."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON record."),
) -> None:
    """Show one stored scrape."""
    conn = get_connection()
    init_db(conn)
    try:
        row = get_scrape(conn, scrape_id)
    finally:
        conn.close()

    if row is None:
        typer.echo(f"❌ Scrape not found: {scrape_id}")
        raise typer.Exit(code=1)

    record = row.as_record()
    typer.echo(json.dumps(record, indent=2) if as_json else render_record(record))
