"""Countdown state and the timer abstraction that drives it."""

from __future__ import annotations

from typing import Callable, Protocol

from practice_app.constants.quiz_constants import SECONDS_PER_MINUTE


class TickTimer(Protocol):
    """A cancellable repeating timer.

    The session controller creates one handle each time it enters the
    active state and stops it on every exit from that state.
    """

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        ...

    def stop(self) -> None:
        ...


TimerFactory = Callable[[], TickTimer]


class Countdown:
    """Remaining time of a timed quiz, in whole seconds."""

    def __init__(self, total_seconds: int) -> None:
        if total_seconds <= 0:
            raise ValueError("Time limit must be a positive number of seconds.")
        self._total_seconds = total_seconds
        self._remaining_seconds = total_seconds
        self._frozen = False

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def is_expired(self) -> bool:
        return self._remaining_seconds == 0

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def tick(self) -> bool:
        """Decrement by one second. Returns True when this tick reached zero."""
        if self._frozen or self._remaining_seconds == 0:
            return False
        self._remaining_seconds -= 1
        return self._remaining_seconds == 0

    def freeze(self) -> None:
        self._frozen = True

    def resume(self) -> None:
        """Unfreeze unless the time already ran out."""
        if not self.is_expired:
            self._frozen = False

    def fraction_remaining(self) -> float:
        return self._remaining_seconds / self._total_seconds


def format_remaining(seconds: int) -> str:
    """Render seconds as ``m:ss`` for the countdown label."""
    minutes, secs = divmod(max(0, seconds), SECONDS_PER_MINUTE)
    return f"{minutes}:{secs:02d}"
