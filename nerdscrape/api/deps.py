"""Request-scoped dependencies."""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterator, Optional

from nerdscrape.db import get_connection

logger = logging.getLogger(__name__)


def get_db() -> Iterator[sqlite3.Connection]:
    """Open a connection for one request and close it afterwards.

    Requests never share a connection; the schema is created once at startup.
    """
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def get_db_or_none() -> Iterator[Optional[sqlite3.Connection]]:
    """Like :func:`get_db`, but yield ``None`` when the store cannot be opened.

    The scrape endpoint still runs and reports a ``local-<ms>`` id.
    """
    try:
        conn = get_connection()
    except (sqlite3.Error, OSError) as exc:
        logger.error("Opening the store failed: %s", exc)
        yield None
        return
    try:
        yield conn
    finally:
        conn.close()
