"""Per-request wall-clock budget."""

from __future__ import annotations

from dataclasses import dataclass

from nerdscrape.errors import BudgetExceededError
from nerdscrape.pipeline.clock import Clock


@dataclass
class Deadline:
    """Tracks how much of a request's time budget is left.

    Attributes:
        started_at: Request receipt time in epoch milliseconds.
        budget: Total seconds the request may take.
        clock: Source of "now".
    """

    started_at: int
    budget: float
    clock: Clock

    def elapsed_ms(self) -> int:
        return max(0, self.clock() - self.started_at)

    def remaining(self) -> float:
        """Seconds left before the budget is spent (never negative)."""
        return max(0.0, self.budget - self.elapsed_ms() / 1000)

    def clamp(self, timeout: float) -> float:
        """Shrink *timeout* so it cannot outlive the budget."""
        return min(timeout, self.remaining())

    def check(self, stage: str) -> None:
        """Raise :class:`BudgetExceededError` once no time is left."""
        if self.remaining() <= 0:
            raise BudgetExceededError(
                f"Scrape exceeded the {self.budget:g}s time budget during {stage}"
            )
