"""Shared test helpers for MultiTimer."""

from __future__ import annotations

from multitimer.timer.models import TimerDraft
from multitimer.timer.store import TimerStore


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeAlarm:
    """Counts start/stop calls and tracks whether it is ringing."""

    def __init__(self):
        self.starts = 0
        self.stops = 0
        self.active = False

    def start(self):
        self.starts += 1
        self.active = True

    def stop(self):
        self.stops += 1
        self.active = False


class FakeAlerts:
    """In-memory alert surface."""

    def __init__(self):
        self.raised: list[tuple[str, str]] = []
        self.retracted: list[str] = []
        self.outstanding: dict[str, str] = {}
        self._callbacks: dict = {}
        self._next = 0

    def raise_alert(self, message, on_dismiss):
        self._next += 1
        alert_id = f"a{self._next}"
        self.raised.append((alert_id, message))
        self.outstanding[alert_id] = message
        self._callbacks[alert_id] = on_dismiss
        return alert_id

    def retract(self, alert_id):
        self.retracted.append(alert_id)
        self.outstanding.pop(alert_id, None)

    def click_dismiss(self, alert_id):
        """Simulate the user pressing Dismiss on the toast."""
        self._callbacks[alert_id]()


class MemoryKV:
    """Dict-backed key-value store with optional failure injection."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key):
        if self.fail_reads:
            raise OSError("disk unavailable")
        return self.data.get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value


def add_timer(store: TimerStore, title: str = "Tea", duration: int = 5, description: str = ""):
    return store.add(TimerDraft(title=title, duration=duration, description=description))


def run_down(store: TimerStore, timer_id: str, ticks: int) -> None:
    for _ in range(ticks):
        store.tick(timer_id)
