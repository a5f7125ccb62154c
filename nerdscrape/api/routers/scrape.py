"""Scrape endpoint.

Routes
------
POST /api/scrape    Body: {"url": "...", "mode": "basic"|"nerd", "customPrompt": "..."}

Responses
---------
200  Success record.
400  ``{"error": "..."}`` when the URL or mode is rejected.
500  Error record (``status: "error"``, ``errorMessage``, zeroed counts).
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from nerdscrape.api.deps import get_db_or_none
from nerdscrape.errors import InvalidInputError
from nerdscrape.pipeline.models import BASIC, ScrapeRequest
from nerdscrape.pipeline.runner import run_scrape

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Checked by the pipeline validator, which answers with a 400
    url: Optional[str] = None
    mode: Optional[str] = BASIC
    custom_prompt: Optional[str] = Field(default=None, alias="customPrompt")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
def scrape(
    body: ScrapeBody, conn: Optional[sqlite3.Connection] = Depends(get_db_or_none)
) -> JSONResponse:
    """Fetch, extract, optionally enrich, and store a single page."""
    request = ScrapeRequest(
        url=body.url or "",
        mode=body.mode or BASIC,
        custom_prompt=body.custom_prompt,
    )
    try:
        response = run_scrape(conn, request)
    except InvalidInputError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    return JSONResponse(response.result.to_dict(), status_code=response.http_status)
