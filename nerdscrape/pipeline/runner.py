"""Top-level scrape orchestration.

``run_scrape`` drives one request through

    validate → fetch → sanitize → extract → (enrich) → assemble → persist

Validation failures raise :class:`~nerdscrape.errors.InvalidInputError`
before any network access.  Every later failure becomes a
:class:`~nerdscrape.pipeline.models.ScrapeFailure` record that is still
persisted and returned.  Persistence itself never fails the request.
"""

from __future__ import annotations

import dataclasses
import logging
import sqlite3
from typing import Optional

from nerdscrape.config import settings
from nerdscrape.errors import ExtractionError, InvalidInputError
from nerdscrape.pipeline.annotator import Annotator, annotate_safely
from nerdscrape.pipeline.assembler import MAX_AI_INPUT_CHARS, assemble, assemble_failure
from nerdscrape.pipeline.budget import Deadline
from nerdscrape.pipeline.clock import Clock, now_ms
from nerdscrape.pipeline.models import MODES, ScrapeRequest, ScrapeResponse, ScrapeSuccess
from nerdscrape.pipeline.modes import decide_enrichment
from nerdscrape.pipeline.persistence import persist
from nerdscrape.scraper.extractor import extract_content
from nerdscrape.scraper.fetcher import fetch_url
from nerdscrape.scraper.models import PageExtraction
from nerdscrape.scraper.sanitizer import sanitize
from nerdscrape.scraper.validator import is_allowed_host, is_valid_url

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Invalid URL provided"


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def validate_request(request: ScrapeRequest) -> None:
    """Raise :class:`InvalidInputError` unless *request* may be fetched."""
    if not is_valid_url(request.url):
        raise InvalidInputError(INVALID_URL_MESSAGE)
    if request.mode not in MODES:
        raise InvalidInputError(f"Invalid mode provided: {request.mode!r}")
    if not is_allowed_host(request.url, settings.denied_hosts):
        raise InvalidInputError("URL host is not allowed")


def _extract(html: str, include_structured: bool) -> PageExtraction:
    try:
        return extract_content(sanitize(html), include_structured=include_structured)
    except Exception as exc:
        raise ExtractionError(f"Failed to extract content: {exc}") from exc


def _run_stages(
    request: ScrapeRequest,
    started_at: int,
    deadline: Deadline,
    clock: Clock,
    annotator: Optional[Annotator],
) -> ScrapeSuccess:
    plan = decide_enrichment(request.mode, request.custom_prompt)

    deadline.check("fetch")
    raw = fetch_url(request.url, timeout=deadline.clamp(settings.request_timeout))
    deadline.check("fetch")

    extraction = _extract(raw.html, include_structured=plan is not None)
    deadline.check("extraction")

    ai_analysis = None
    if plan is not None:
        ai_analysis = annotate_safely(
            extraction.body_text[:MAX_AI_INPUT_CHARS],
            plan.prompt,
            annotator=annotator,
            timeout=deadline.remaining(),
        )
        deadline.check("enrichment")

    return assemble(request.url, extraction, ai_analysis, started_at, clock)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_scrape(
    conn: Optional[sqlite3.Connection],
    request: ScrapeRequest,
    clock: Clock = now_ms,
    annotator: Optional[Annotator] = None,
) -> ScrapeResponse:
    """Scrape ``request.url`` and persist the outcome.

    Args:
        conn: Open, initialised DB connection used for the single store write,
            or ``None`` when the store could not be opened.
        request: URL (surrounding whitespace is stripped before validation,
            fetch and storage), mode (``basic``/``nerd``) and optional
            custom prompt.
        clock: Epoch-millisecond clock; request start and durations use it.
        annotator: Override for the LLM call (defaults to
            :func:`~nerdscrape.pipeline.annotator.annotate`).

    Returns:
        A :class:`ScrapeResponse` with the success or error record (its ``id``
        filled in from the persistence outcome).

    Raises:
        InvalidInputError: The URL, mode, or host was rejected.  Nothing is
            fetched or persisted.
    """
    started_at = clock()
    if isinstance(request.url, str):
        request = dataclasses.replace(request, url=request.url.strip())
    validate_request(request)
    deadline = Deadline(started_at=started_at, budget=settings.request_budget, clock=clock)

    try:
        result = _run_stages(request, started_at, deadline, clock, annotator)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Scrape of %s failed: %s", request.url, exc)
        result = assemble_failure(request.url, str(exc), started_at, clock)

    persistence = persist(conn, result, clock)
    result = dataclasses.replace(result, id=persistence.id)
    logger.info(
        "Scrape of %s finished: status=%s duration=%dms id=%s",
        request.url,
        result.status,
        result.metadata.scrape_duration,
        result.id,
    )
    return ScrapeResponse(result=result, persistence=persistence)
