"""Content extraction: turns a sanitized document into a :class:`PageExtraction`."""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from nerdscrape.scraper.models import ImageItem, LinkItem, PageExtraction, StructuredData

NO_TITLE = "No title found"
NO_DESCRIPTION = "No description available"

MAX_HEADINGS = 20
MAX_LINKS = 50
MAX_IMAGES = 30

_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_WHITESPACE = re.compile(r"\s+")

# Elements whose boundaries separate words in rendered text
_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "caption", "dd",
    "details", "div", "dl", "dt", "fieldset", "figcaption", "figure",
    "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
    "li", "main", "nav", "ol", "p", "pre", "section", "summary", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})
_NON_BODY_TAGS = frozenset({"head", "title"})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _text(tag: Tag) -> str:
    return tag.get_text().strip()


def _extract_title(soup: BeautifulSoup) -> str:
    """First ``<title>``, else first ``<h1>``, else :data:`NO_TITLE`."""
    for name in ("title", "h1"):
        tag = soup.find(name)
        if tag is not None and _text(tag):
            return _text(tag)
    return NO_TITLE


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content or None


def _extract_description(soup: BeautifulSoup) -> str:
    return (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or NO_DESCRIPTION
    )


def _gather_text(node: Tag, parts: List[str], skip: frozenset = frozenset()) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name in skip:
                continue
            block = child.name in _BLOCK_TAGS
            if block:
                parts.append(" ")
            _gather_text(child, parts, skip)
            if block:
                parts.append(" ")
        elif type(child) is NavigableString:
            parts.append(str(child))


def _body_text(soup: BeautifulSoup) -> str:
    """All text under ``<body>`` with whitespace runs collapsed to one space.

    Text nodes are concatenated as they appear, so inline markup such as
    ``Hel<b>lo</b>`` stays one word.  A space goes in only at block-level
    element boundaries.  Pages without an explicit ``<body>`` fall back to
    every text node outside ``<head>``/``<title>``.
    """
    parts: List[str] = []
    if soup.body is not None:
        _gather_text(soup.body, parts)
    else:
        _gather_text(soup, parts, skip=_NON_BODY_TAGS)
    return _WHITESPACE.sub(" ", "".join(parts)).strip()


def _extract_structured(soup: BeautifulSoup, headings: List[str]) -> StructuredData:
    """Keep the first N of each collection in document order, drop the rest."""
    links = tuple(
        LinkItem(text=_text(a), href=a.get("href"))
        for a in soup.find_all("a", limit=MAX_LINKS)
    )
    images = tuple(
        ImageItem(src=img.get("src"), alt=img.get("alt"))
        for img in soup.find_all("img", limit=MAX_IMAGES)
    )
    return StructuredData(
        headings=tuple(headings[:MAX_HEADINGS]),
        links=links,
        images=images,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_content(soup: BeautifulSoup, include_structured: bool = False) -> PageExtraction:
    """Derive title, description, text, and counts from a sanitized *soup*.

    Args:
        soup: Output of :func:`~nerdscrape.scraper.sanitizer.sanitize`.
        include_structured: Materialise the capped headings/links/images
            payload (``nerd`` mode only).
    """
    paragraphs = [_text(p) for p in soup.find_all("p")]
    headings = [_text(h) for h in soup.find_all(_HEADING_TAGS)]

    return PageExtraction(
        title=_extract_title(soup),
        description=_extract_description(soup),
        body_text=_body_text(soup),
        paragraphs=paragraphs,
        headings=headings,
        image_count=len(soup.find_all("img")),
        link_count=len(soup.find_all("a")),
        structured=_extract_structured(soup, headings) if include_structured else None,
    )
