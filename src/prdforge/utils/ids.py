"""ID utilities."""

from __future__ import annotations

import time
from typing import Callable


def wall_clock_ms() -> int:
    """Milliseconds since the epoch."""

    return time.time_ns() // 1_000_000


class MonotonicIds:
    """Time-based ids that never repeat or go backwards.

    Each id is `max(clock(), last + 1)`, so a clock that stalls or steps back still yields a
    strictly increasing sequence.

    Args:
        clock: Callable returning an integer timestamp.
        last: Highest id already issued (e.g. loaded from storage).
    """

    def __init__(self, clock: Callable[[], int] = wall_clock_ms, *, last: int | None = None) -> None:
        self._clock = clock
        self._last = last

    @property
    def last(self) -> int | None:
        return self._last

    def observe(self, issued: int) -> None:
        """Record an externally issued id so later ids stay above it."""

        if self._last is None or issued > self._last:
            self._last = issued

    def reset(self) -> None:
        self._last = None

    def next_id(self) -> int:
        candidate = int(self._clock())
        if self._last is not None and candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate
