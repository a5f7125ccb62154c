"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from nerdscrape.api import app

    uvicorn nerdscrape.api:app --reload
"""

from nerdscrape.api.app import app

__all__ = ["app"]
