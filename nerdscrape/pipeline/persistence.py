"""Persist a finished record without ever failing the request."""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from nerdscrape.db.scrapes import insert_scrape
from nerdscrape.pipeline.clock import Clock
from nerdscrape.pipeline.models import PersistOutcome, ScrapeResult, Stored, StoredLocally

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = "Store unavailable"


def persist(conn: Optional[sqlite3.Connection], record: ScrapeResult, clock: Clock) -> PersistOutcome:
    """Write *record* to the store.

    Returns :class:`Stored` with the durable id, or :class:`StoredLocally`
    with a ``local-<epoch ms>`` id when there is no connection or the write
    fails for any reason.
    """
    if conn is None:
        logger.error("No store for %s record for %s", record.status, record.url)
        return StoredLocally(id=f"local-{clock()}", reason=STORE_UNAVAILABLE)
    try:
        return Stored(id=insert_scrape(conn, record))
    except Exception as exc:  # noqa: BLE001
        logger.error("Saving %s record for %s failed: %s", record.status, record.url, exc)
        return StoredLocally(id=f"local-{clock()}", reason=str(exc))
