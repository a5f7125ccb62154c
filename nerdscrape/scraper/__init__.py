"""Scraper package: URL gate, fetch, sanitize, and content extraction."""

from nerdscrape.scraper.extractor import extract_content
from nerdscrape.scraper.fetcher import fetch_url
from nerdscrape.scraper.models import PageExtraction, RawPage, StructuredData
from nerdscrape.scraper.sanitizer import sanitize
from nerdscrape.scraper.validator import is_allowed_host, is_valid_url

__all__ = [
    "fetch_url",
    "sanitize",
    "extract_content",
    "is_valid_url",
    "is_allowed_host",
    "RawPage",
    "PageExtraction",
    "StructuredData",
]
