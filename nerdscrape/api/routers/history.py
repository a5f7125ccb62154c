"""Read-only access to stored scrape records.

Routes
------
GET /api/scrapes               List records, newest first (?status=, ?limit=)
GET /api/scrapes/{scrape_id}   Fetch one record
"""

from __future__ import annotations

import sqlite3
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nerdscrape.api.deps import get_db
from nerdscrape.db.scrapes import get_scrape, list_scrapes

router = APIRouter()


@router.get("")
def list_all(
    status: Optional[Literal["success", "error"]] = None,
    limit: int = Query(50, ge=1, le=500),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[dict[str, Any]]:
    """Return stored records, optionally only successes or only errors."""
    return [row.as_record() for row in list_scrapes(conn, status=status, limit=limit)]


@router.get("/{scrape_id}")
def get_one(scrape_id: str, conn: sqlite3.Connection = Depends(get_db)) -> dict[str, Any]:
    """Fetch a single stored record by id."""
    row = get_scrape(conn, scrape_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Scrape not found: {scrape_id!r}")
    return row.as_record()
