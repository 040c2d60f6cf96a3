"""Tests for the notification channel."""

from __future__ import annotations

from prdforge.notifications import Notifier


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_notification_expires_after_ttl() -> None:
    """It should hide a notification once its ttl has passed."""

    clock = FakeClock()
    notifier = Notifier(ttl_s=3.8, clock=clock)
    notifier.notify("saved")

    clock.now = 3.7
    assert notifier.current() == "saved"
    clock.now = 3.8
    assert notifier.current() is None


def test_new_notification_replaces_timer() -> None:
    """It should restart the deadline with each new notification."""

    clock = FakeClock()
    notifier = Notifier(ttl_s=3.8, clock=clock)
    notifier.notify("first")
    clock.now = 3.0
    notifier.notify("second")

    clock.now = 5.0
    assert notifier.current() == "second"
    clock.now = 6.8
    assert notifier.current() is None
    assert notifier.history == ["first", "second"]


def test_dismiss() -> None:
    """It should clear the active notification on dismiss."""

    notifier = Notifier(ttl_s=60.0)
    notifier.notify("hello")
    notifier.dismiss()
    assert notifier.current() is None
