"""Build the final result record.  Pure: no I/O, time comes from the clock."""

from __future__ import annotations

from typing import Optional

from nerdscrape.pipeline.clock import Clock
from nerdscrape.pipeline.models import ScrapeFailure, ScrapeMetadata, ScrapeSuccess
from nerdscrape.scraper.models import PageExtraction

MAX_CONTENT_CHARS = 5000
MAX_AI_INPUT_CHARS = 10000

DEFAULT_ERROR_MESSAGE = "Failed to scrape website"


def assemble(
    url: str,
    extraction: PageExtraction,
    ai_analysis: Optional[str],
    started_at: int,
    clock: Clock,
) -> ScrapeSuccess:
    """Merge *extraction* and the optional annotation into a success record.

    ``scrape_duration`` is measured now, so enrichment latency is included.
    ``content`` is the first :data:`MAX_CONTENT_CHARS` characters of the body
    text; the word count still covers the full text.
    """
    now = clock()
    return ScrapeSuccess(
        url=url,
        title=extraction.title,
        description=extraction.description,
        content=extraction.body_text[:MAX_CONTENT_CHARS],
        timestamp=now,
        metadata=ScrapeMetadata(
            word_count=extraction.word_count,
            image_count=extraction.image_count,
            link_count=extraction.link_count,
            paragraph_count=extraction.paragraph_count,
            scrape_duration=max(0, now - started_at),
        ),
        extracted_data=extraction.structured,
        ai_analysis=ai_analysis,
    )


def assemble_failure(url: str, message: str, started_at: int, clock: Clock) -> ScrapeFailure:
    """Error record with zeroed counts and the duration up to the failure."""
    now = clock()
    return ScrapeFailure(
        url=url,
        error_message=message or DEFAULT_ERROR_MESSAGE,
        timestamp=now,
        metadata=ScrapeMetadata(scrape_duration=max(0, now - started_at)),
    )
