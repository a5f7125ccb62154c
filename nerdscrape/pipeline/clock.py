"""Clock capability threaded through the pipeline."""

from __future__ import annotations

import time
from typing import Callable

# Zero-argument callable returning the current time in epoch milliseconds
Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)
