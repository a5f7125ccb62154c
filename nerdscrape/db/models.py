"""Dataclass models representing DB rows.

These are plain Python objects, not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ScrapeRow:
    id: str
    url: str
    status: str
    payload: dict[str, Any]
    timestamp: int
    created_at: int

    def as_record(self) -> dict[str, Any]:
        """The stored wire-format record with its durable ``id`` filled in."""
        return {**self.payload, "id": self.id}
