"""Append-only operations for the ``scrapes`` table."""

from __future__ import annotations

import json
import sqlite3
import uuid
from typing import Optional

from nerdscrape.db.models import ScrapeRow
from nerdscrape.pipeline.models import ScrapeResult


def _row_to_scrape(row: sqlite3.Row) -> ScrapeRow:
    return ScrapeRow(
        id=row["id"],
        url=row["url"],
        status=row["status"],
        payload=json.loads(row["payload"] or "{}"),
        timestamp=row["timestamp"],
        created_at=row["created_at"],
    )


def insert_scrape(conn: sqlite3.Connection, record: ScrapeResult) -> str:
    """Store *record* under a fresh UUID and return that id.

    The record's own ``id`` (normally empty before storage) is not persisted
    in the payload; :meth:`ScrapeRow.as_record` restores it on read.

    Raises:
        sqlite3.Error: If the write fails.
    """
    sid = str(uuid.uuid4())
    payload = record.to_dict()
    payload.pop("id", None)

    with conn:
        conn.execute(
            """
            INSERT INTO scrapes (id, url, status, payload, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (sid, record.url, record.status, json.dumps(payload), record.timestamp),
        )
    return sid


def get_scrape(conn: sqlite3.Connection, scrape_id: str) -> Optional[ScrapeRow]:
    """Fetch a single stored scrape.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM scrapes WHERE id = ?", (scrape_id,)).fetchone()
    return _row_to_scrape(row) if row else None


def list_scrapes(
    conn: sqlite3.Connection,
    status: Optional[str] = None,
    limit: int = 50,
) -> list[ScrapeRow]:
    """Return stored scrapes newest first, optionally filtered by ``status``."""
    if status:
        rows = conn.execute(
            "SELECT * FROM scrapes WHERE status = ? ORDER BY timestamp DESC, rowid DESC LIMIT ?",
            (status, limit),
        ).fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM scrapes ORDER BY timestamp DESC, rowid DESC LIMIT ?",
            (limit,),
        ).fetchall()
    return [_row_to_scrape(r) for r in rows]
