"""QTimer-backed implementation of the countdown timer handle."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtTickTimer:
    """Repeating timer that runs its callback on the Qt event loop.

    Each handle is single-use: ``stop`` schedules the underlying QTimer for
    deletion, so a parent that outlives many sessions does not collect them.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer: QTimer | None = QTimer(parent)
        self._callback: Callable[[], None] | None = None
        self._timer.timeout.connect(self._fire)

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        if self._timer is None:
            raise RuntimeError("QtTickTimer cannot be restarted after stop().")
        self._callback = callback
        self._timer.setInterval(interval_ms)
        self._timer.start()

    def stop(self) -> None:
        self._callback = None
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()
