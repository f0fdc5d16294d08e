"""Expiry notifier — alert once per expiry, one alarm for all of them.

Each timer id has a small state machine::

    ARMED ──(remaining seen going to 0)──▶ EXPIRED
    EXPIRED ──(dismiss / restart / edit / delete)──▶ ARMED

Entering EXPIRED raises a persistent alert for that timer and, if it is
the first outstanding expiry, starts the shared alarm.  Leaving EXPIRED
retracts the alert and, if it was the last one, stops the alarm.  The
set of expired ids lives here and nowhere else; the alarm runs exactly
while that set is non-empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from .models import TimerRecord
from .store import TimerStore

logger = logging.getLogger(__name__)


class Alarm(Protocol):
    def start(self) -> None: ...
    def stop(self) -> None: ...


class AlertSurface(Protocol):
    def raise_alert(self, message: str, on_dismiss: Callable[[], None]) -> str: ...
    def retract(self, alert_id: str) -> None: ...


class ExpiryState(Enum):
    ARMED = "armed"
    EXPIRED = "expired"


@dataclass
class _Watch:
    state: ExpiryState = ExpiryState.ARMED
    alert_id: str | None = None
    last_remaining: int | None = None


def expiry_message(title: str) -> str:
    return f'Timer "{title}" has ended!'


class ExpiryNotifier(QObject):
    """Tracks expiries for every timer and owns the alarm ref-count.

    Signals
    -------
    expired(timer_id: str)
    dismissed(timer_id: str)
    alarm_changed(active: bool)
    """

    expired = pyqtSignal(str)
    dismissed = pyqtSignal(str)
    alarm_changed = pyqtSignal(bool)

    def __init__(
        self,
        alarm: Alarm,
        alerts: AlertSurface,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._alarm = alarm
        self._alerts = alerts
        self._watches: dict[str, _Watch] = {}
        self._expired: set[str] = set()

    # ── queries ───────────────────────────────────────────────────────

    @property
    def alarm_active(self) -> bool:
        return bool(self._expired)

    @property
    def expired_ids(self) -> frozenset[str]:
        return frozenset(self._expired)

    def state_of(self, timer_id: str) -> ExpiryState:
        watch = self._watches.get(timer_id)
        return watch.state if watch else ExpiryState.ARMED

    # ── wiring ────────────────────────────────────────────────────────

    def watch_store(self, store: TimerStore) -> None:
        """Observe every change *store* makes; deletions dismiss."""

        def _on_changed(timer_id: str) -> None:
            record = store.get(timer_id)
            if record is not None:
                self.observe(record)

        store.timer_added.connect(_on_changed)
        store.timer_updated.connect(_on_changed)
        store.timer_removed.connect(self.forget)
        for record in store.timers:
            self.observe(record)

    # ── transitions ───────────────────────────────────────────────────

    def observe(self, record: TimerRecord) -> None:
        """Feed the latest state of a timer; fires on a change to zero."""
        watch = self._watches.setdefault(record.id, _Watch())
        previous = watch.last_remaining
        watch.last_remaining = record.remaining_time

        if watch.state is ExpiryState.EXPIRED and record.remaining_time > 0:
            # only restart or edit put time back on an expired timer
            self.rearm(record.id)
        if record.remaining_time > 0 or previous == 0:
            return
        if watch.state is ExpiryState.EXPIRED:
            return
        self._expire(record, watch)

    def dismiss(self, timer_id: str) -> None:
        """EXPIRED → ARMED.  Dismissing twice is harmless."""
        watch = self._watches.get(timer_id)
        if watch is None or watch.state is not ExpiryState.EXPIRED:
            return

        alert_id, watch.alert_id = watch.alert_id, None
        watch.state = ExpiryState.ARMED
        self._expired.discard(timer_id)

        if alert_id is not None:
            self._alerts.retract(alert_id)
        if not self._expired:
            self._stop_alarm()
        self.dismissed.emit(timer_id)

    def rearm(self, timer_id: str) -> None:
        """Back to ARMED whatever the current state (restart / edit)."""
        self.dismiss(timer_id)

    def forget(self, timer_id: str) -> None:
        """The timer is gone: dismiss it and drop its state."""
        self.dismiss(timer_id)
        self._watches.pop(timer_id, None)

    # ── internal ──────────────────────────────────────────────────────

    def _expire(self, record: TimerRecord, watch: _Watch) -> None:
        first = not self._expired
        watch.state = ExpiryState.EXPIRED
        self._expired.add(record.id)
        if first:
            self._start_alarm()
        watch.alert_id = self._alerts.raise_alert(
            expiry_message(record.title),
            partial(self.dismiss, record.id),
        )
        logger.info("Timer %s (%s) expired", record.id, record.title)
        self.expired.emit(record.id)

    def _start_alarm(self) -> None:
        try:
            self._alarm.start()
        except Exception:
            logger.exception("Alarm failed to start")
        self.alarm_changed.emit(True)

    def _stop_alarm(self) -> None:
        try:
            self._alarm.stop()
        except Exception:
            logger.exception("Alarm failed to stop")
        self.alarm_changed.emit(False)
