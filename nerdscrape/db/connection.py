"""SQLite connection factory.

Usage::

    from nerdscrape.db.connection import get_connection

    conn = get_connection()
    try:
        conn.execute("SELECT 1")
    finally:
        conn.close()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from nerdscrape.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    Steps performed on every new connection:
    1. Enable ``PRAGMA foreign_keys = ON``.
    2. Switch to WAL journal mode for concurrent readers.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    # The API opens the connection in a dependency and uses it in the
    # endpoint, which may run on a different worker thread.
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    return conn
