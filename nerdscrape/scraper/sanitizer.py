"""Parse raw markup and drop every non-content subtree before extraction."""

from __future__ import annotations

from bs4 import BeautifulSoup

NON_CONTENT_TAGS = ["script", "style", "noscript", "iframe"]


def sanitize(html: str) -> BeautifulSoup:
    """Return a parsed document with script/style/noscript/iframe removed.

    ``html.parser`` recovers from malformed markup instead of raising, so
    broken pages still yield a (possibly sparse) tree.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        # Nested matches are already gone once their ancestor is decomposed
        if not tag.decomposed:
            tag.decompose()
    return soup
