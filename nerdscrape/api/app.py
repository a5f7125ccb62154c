"""FastAPI application factory.

Lifespan
--------
On startup the app creates the SQLite schema once.  Each request then opens
its own connection through :func:`nerdscrape.api.deps.get_db`.

Routers
-------
    /api/scrape   run the scrape pipeline for one URL
    /api/scrapes  browse stored scrape records
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nerdscrape import __version__
from nerdscrape.db import get_connection, init_db
from nerdscrape.log import configure_logging

from nerdscrape.api.routers import history as history_router
from nerdscrape.api.routers import scrape as scrape_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Make sure the schema exists before the first request.

    An unreachable store is logged, not fatal: scrapes then come back with
    ``local-<ms>`` ids.
    """
    try:
        conn = get_connection()
        try:
            init_db(conn)
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as exc:
        logger.error("Store initialisation failed: %s", exc)
    yield


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query strings get the same ``{"error": ...}`` shape as bad URLs."""
    return JSONResponse({"error": "Invalid request"}, status_code=400)


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()

    app = FastAPI(
        title="nerdscrape API",
        description=(
            "Fetches a single web page, extracts its title, description, text "
            "and structure, and optionally enriches it with an AI analysis."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # The presentation layer is a separate browser app on any origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _invalid_request)

    app.include_router(scrape_router.router, prefix="/api/scrape", tags=["scrape"])
    app.include_router(history_router.router, prefix="/api/scrapes", tags=["history"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn nerdscrape.api.app:app --reload
app = create_app()
