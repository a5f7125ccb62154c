"""Exception hierarchy for the scrape pipeline.

Only ``InvalidInputError`` ever reaches an HTTP caller as an exception; the
remaining ``ScrapeError`` subclasses are turned into error records by the
pipeline runner.  Enrichment and persistence failures never raise past their
own adapters.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for every failure the pipeline knows how to report."""


class InvalidInputError(ScrapeError):
    """The request was rejected before any network access took place."""


class FetchError(ScrapeError):
    """The page could not be retrieved (status, connection, DNS or timeout)."""


class ExtractionError(ScrapeError):
    """The markup could not be parsed or walked."""


class BudgetExceededError(ScrapeError):
    """The overall per-request time budget ran out between stages."""
