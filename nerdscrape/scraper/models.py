"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class LinkItem:
    text: str
    href: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "href": self.href}


@dataclass(frozen=True)
class ImageItem:
    src: Optional[str] = None
    alt: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "alt": self.alt}


@dataclass(frozen=True)
class StructuredData:
    """Capped headings / links / images payload attached in ``nerd`` mode."""

    headings: tuple[str, ...] = ()
    links: tuple[LinkItem, ...] = ()
    images: tuple[ImageItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "headings": list(self.headings),
            "links": [link.to_dict() for link in self.links],
            "images": [image.to_dict() for image in self.images],
        }


@dataclass(frozen=True)
class PageExtraction:
    """Everything the extractor derives from one sanitized document."""

    title: str
    description: str
    body_text: str
    paragraphs: List[str] = field(default_factory=list)
    headings: List[str] = field(default_factory=list)
    image_count: int = 0
    link_count: int = 0
    structured: Optional[StructuredData] = None

    @property
    def word_count(self) -> int:
        """Whitespace-delimited tokens in the full body text (0 when empty)."""
        return len(self.body_text.split())

    @property
    def paragraph_count(self) -> int:
        return len(self.paragraphs)
