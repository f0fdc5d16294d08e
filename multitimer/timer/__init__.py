"""Timer package."""

from .models import TimerDraft, TimerRecord, format_time
from .notifier import ExpiryNotifier, ExpiryState, expiry_message
from .persistence import STORAGE_KEY, TimerPersistence
from .store import TimerStore
from .ticker import TICK_INTERVAL_MS, Ticker

__all__ = [
    "TimerDraft",
    "TimerRecord",
    "format_time",
    "ExpiryNotifier",
    "ExpiryState",
    "expiry_message",
    "STORAGE_KEY",
    "TimerPersistence",
    "TimerStore",
    "TICK_INTERVAL_MS",
    "Ticker",
]
