"""nerdscrape: single-page fetch, extraction, and optional AI enrichment."""

__version__ = "0.1.0"
