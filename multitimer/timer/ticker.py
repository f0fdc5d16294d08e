"""Per-timer one-second driver.

A :class:`Ticker` belongs to one displayed timer.  Its ``QTimer`` runs
only while that timer exists, is running and has time left.  Every
timeout looks the record up again by id, so a timeout that lands just
after a pause, restart or delete does nothing.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer

from .store import TimerStore

TICK_INTERVAL_MS = 1000


class Ticker(QObject):
    def __init__(
        self,
        store: TimerStore,
        timer_id: str,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._timer_id = timer_id
        self._disposed = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

        self._store.timer_updated.connect(self._on_timer_updated)
        self._store.timer_removed.connect(self._on_timer_updated)
        self.sync()

    @property
    def timer_id(self) -> str:
        return self._timer_id

    @property
    def active(self) -> bool:
        """True while the periodic driver is scheduled."""
        return self._qt_timer.isActive()

    def should_run(self) -> bool:
        if self._disposed:
            return False
        record = self._store.get(self._timer_id)
        return record is not None and record.is_running and record.remaining_time > 0

    def sync(self) -> None:
        """Start or stop the driver to match the current record."""
        if self.should_run():
            if not self._qt_timer.isActive():
                self._qt_timer.start()
        else:
            self._qt_timer.stop()

    def dispose(self) -> None:
        """Stop for good (the timer's display went away)."""
        self._disposed = True
        self._qt_timer.stop()
        try:
            self._store.timer_updated.disconnect(self._on_timer_updated)
            self._store.timer_removed.disconnect(self._on_timer_updated)
        except TypeError:
            pass

    # ── internal ──────────────────────────────────────────────────────

    def _on_timer_updated(self, timer_id: str) -> None:
        if timer_id == self._timer_id:
            self.sync()

    def _on_timeout(self) -> None:
        if not self.should_run():
            self._qt_timer.stop()
            return
        self._store.tick(self._timer_id)
        self.sync()
