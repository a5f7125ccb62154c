"""Request, result, and persistence-outcome types for the scrape pipeline.

Results form a closed union: :class:`ScrapeSuccess` or :class:`ScrapeFailure`,
decided once at assembly time.  ``to_dict()`` renders the camelCase wire
shape returned to HTTP callers and stored in the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from nerdscrape.scraper.models import StructuredData

BASIC = "basic"
NERD = "nerd"
MODES = (BASIC, NERD)


@dataclass(frozen=True)
class ScrapeRequest:
    url: str
    mode: str = BASIC
    custom_prompt: Optional[str] = None


@dataclass(frozen=True)
class ScrapeMetadata:
    word_count: int = 0
    image_count: int = 0
    link_count: int = 0
    paragraph_count: int = 0
    scrape_duration: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "wordCount": self.word_count,
            "imageCount": self.image_count,
            "linkCount": self.link_count,
            "paragraphCount": self.paragraph_count,
            "scrapeDuration": self.scrape_duration,
        }


@dataclass(frozen=True)
class ScrapeSuccess:
    url: str
    title: str
    description: str
    content: str
    timestamp: int
    metadata: ScrapeMetadata
    extracted_data: Optional[StructuredData] = None
    ai_analysis: Optional[str] = None
    id: str = ""

    status: ClassVar[str] = "success"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "timestamp": self.timestamp,
            "status": self.status,
            "metadata": self.metadata.to_dict(),
        }
        if self.extracted_data is not None:
            payload["extractedData"] = self.extracted_data.to_dict()
        if self.ai_analysis is not None:
            payload["aiAnalysis"] = self.ai_analysis
        return payload


@dataclass(frozen=True)
class ScrapeFailure:
    """Error record: zeroed counts, only ``scrape_duration`` is measured."""

    url: str
    error_message: str
    timestamp: int
    metadata: ScrapeMetadata
    id: str = ""

    status: ClassVar[str] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "status": self.status,
            "errorMessage": self.error_message,
            "timestamp": self.timestamp,
            "metadata": self.metadata.to_dict(),
        }


ScrapeResult = Union[ScrapeSuccess, ScrapeFailure]


# ---------------------------------------------------------------------------
# Persistence outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Stored:
    """The record was written to the durable store under ``id``."""

    id: str

    durable: ClassVar[bool] = True


@dataclass(frozen=True)
class StoredLocally:
    """The store write failed; ``id`` is a synthetic ``local-<ms>`` value."""

    id: str
    reason: str = ""

    durable: ClassVar[bool] = False


PersistOutcome = Union[Stored, StoredLocally]


@dataclass(frozen=True)
class ScrapeResponse:
    """What the runner hands back to the HTTP layer or CLI."""

    result: ScrapeResult
    persistence: PersistOutcome

    @property
    def ok(self) -> bool:
        return isinstance(self.result, ScrapeSuccess)

    @property
    def http_status(self) -> int:
        return 200 if self.ok else 500
