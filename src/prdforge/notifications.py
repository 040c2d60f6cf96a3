"""Auto-dismissing notification channel.

Only the latest notification is active: posting a new one replaces the previous message and its
dismissal deadline.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Notification:
    message: str
    posted_at: float
    expires_at: float


class Notifier:
    """Holds at most one notification, expiring `ttl_s` seconds after it was posted."""

    def __init__(self, ttl_s: float = 3.8, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl_s = ttl_s
        self._clock = clock
        self._current: Notification | None = None
        self._history: list[str] = []

    def notify(self, message: str) -> Notification:
        now = self._clock()
        self._current = Notification(message=message, posted_at=now, expires_at=now + self._ttl_s)
        self._history.append(message)
        return self._current

    def current(self) -> str | None:
        """The active message, or None once its deadline has passed."""

        if self._current is None:
            return None
        if self._clock() >= self._current.expires_at:
            self._current = None
            return None
        return self._current.message

    def dismiss(self) -> None:
        self._current = None

    @property
    def history(self) -> list[str]:
        """Every message posted, oldest first."""

        return list(self._history)
