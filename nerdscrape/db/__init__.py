"""Database layer package.

Public re-exports so callers can write::

    from nerdscrape.db import get_connection, init_db
"""

from nerdscrape.db.connection import get_connection
from nerdscrape.db.migrations import init_db

__all__ = ["get_connection", "init_db"]
