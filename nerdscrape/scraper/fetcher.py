"""Single-shot HTTP fetcher.

One GET per call, no retry, no JavaScript rendering.  Every way the request
can go wrong is reported as a :class:`~nerdscrape.errors.FetchError`.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from nerdscrape.config import settings
from nerdscrape.errors import FetchError
from nerdscrape.scraper.models import RawPage

logger = logging.getLogger(__name__)


def fetch_url(url: str, timeout: Optional[float] = None) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Args:
        url: An already validated ``http``/``https`` URL.
        timeout: Seconds to wait for the whole exchange.  Defaults to
            ``settings.request_timeout``.

    Raises:
        FetchError: On non-2xx status, connection or DNS failure, or timeout.
    """
    timeout = settings.request_timeout if timeout is None else timeout
    logger.debug("Fetching %s (timeout=%.1fs)", url, timeout)

    try:
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return RawPage(url=url, html=response.text, status_code=response.status_code)
    except httpx.TimeoutException as exc:
        logger.warning("Fetch timed out for %s", url)
        raise FetchError(f"Request to {url} timed out after {timeout:g}s") from exc
    except httpx.HTTPError as exc:
        logger.warning("Fetch failed for %s: %s", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc
