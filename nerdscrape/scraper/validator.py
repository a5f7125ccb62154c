"""URL gatekeeping: the only check a caller-supplied URL passes before fetch."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import urlsplit

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def is_valid_url(candidate: object) -> bool:
    """Return ``True`` only for well-formed ``http``/``https`` URLs.

    Never raises: non-strings, empty strings, malformed syntax and any other
    scheme (``ftp:``, ``javascript:``, ``file:`` …) all yield ``False``.
    """
    if not isinstance(candidate, str) or not candidate.strip():
        return False
    try:
        parts = urlsplit(candidate.strip())
        # Accessing .port validates the port component
        parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        return False
    return not any(ch.isspace() for ch in parts.netloc)


def is_allowed_host(url: str, denied_hosts: Iterable[str]) -> bool:
    """Return ``False`` when *url*'s host (or a parent domain) is denied."""
    host = (urlsplit(url).hostname or "").lower()
    for denied in denied_hosts:
        if host == denied or host.endswith("." + denied):
            return False
    return True
