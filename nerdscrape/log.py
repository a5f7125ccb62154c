"""Process-wide logging setup.

Every module logs through ``logging.getLogger(__name__)``; this module only
installs the handler and tames chatty third-party loggers.
"""

from __future__ import annotations

import logging

from nerdscrape.config import settings

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(level: str | None = None) -> None:
    """Install a stream handler at *level* (defaults to ``settings.log_level``)."""
    resolved = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("nerdscrape").setLevel(resolved)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
