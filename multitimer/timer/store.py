"""Timer store — the single source of truth for every timer record.

Operations
----------
load      read persisted timers, stop them, reset finished ones
add       insert a new timer (fresh id, full time, not running)
delete    remove a timer
tick      one-second decrement of a running timer (floors at 0)
edit      merge title/description/duration, countdown starts over
toggle    flip the running flag
restart   full time, not running

Every mutation is a read-modify-write of the current in-memory
collection followed by a write-through of the whole collection.  Ids that
no longer exist are ignored, since UI callbacks may arrive after a delete.

Reaching zero does not clear ``is_running``.  The flag stays set until
the user toggles or restarts the timer (or the app reloads).
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

from PyQt6.QtCore import QObject, pyqtSignal

from .models import EDITABLE_FIELDS, TimerDraft, TimerRecord
from .persistence import TimerPersistence

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class TimerStore(QObject):
    """Owns all :class:`TimerRecord` objects.

    Signals
    -------
    timers_changed()
        Emitted after any mutation (and after ``load``).
    timer_added(timer_id: str)
    timer_removed(timer_id: str)
    timer_updated(timer_id: str)
        Emitted when an existing record was replaced by a changed one.
    """

    timers_changed = pyqtSignal()
    timer_added = pyqtSignal(str)
    timer_removed = pyqtSignal(str)
    timer_updated = pyqtSignal(str)

    def __init__(
        self,
        persistence: TimerPersistence | None = None,
        parent: QObject | None = None,
        *,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        super().__init__(parent)
        self._persistence = persistence or TimerPersistence()
        self._id_factory = id_factory
        self._timers: list[TimerRecord] = []

    # ══════════════════════════════════════════════════════════════════
    #  QUERIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def timers(self) -> list[TimerRecord]:
        """Snapshot of every record, in creation order."""
        return list(self._timers)

    def get(self, timer_id: str) -> TimerRecord | None:
        for timer in self._timers:
            if timer.id == timer_id:
                return timer
        return None

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, timer_id: object) -> bool:
        return isinstance(timer_id, str) and self.get(timer_id) is not None

    # ══════════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ══════════════════════════════════════════════════════════════════

    def load(self) -> list[TimerRecord]:
        """Replace the collection with the persisted one.

        Nothing resumes running across a reload, and a timer that had
        already finished comes back with its full duration.
        """
        self._timers = [
            t.with_changes(
                is_running=False,
                remaining_time=t.duration if t.remaining_time <= 0 else t.remaining_time,
            )
            for t in self._persistence.read()
        ]
        logger.info("Loaded %d timer(s)", len(self._timers))
        self.timers_changed.emit()
        return self.timers

    def add(self, draft: TimerDraft) -> TimerRecord:
        """Insert a new timer.  Field validation happens upstream."""
        record = TimerRecord(
            id=self._unique_id(),
            title=draft.title,
            description=draft.description,
            duration=draft.duration,
            remaining_time=draft.duration,
            is_running=False,
        )
        self._timers = [*self._timers, record]
        self._persist()
        self.timer_added.emit(record.id)
        self.timers_changed.emit()
        return record

    def delete(self, timer_id: str) -> None:
        before = len(self._timers)
        self._timers = [t for t in self._timers if t.id != timer_id]
        removed = len(self._timers) != before
        self._persist()
        if removed:
            self.timer_removed.emit(timer_id)
            self.timers_changed.emit()

    def tick(self, timer_id: str) -> None:
        """Take one second off a running timer.  Never goes below 0."""
        self._update(
            timer_id,
            lambda t: t.with_changes(remaining_time=max(0, t.remaining_time - 1))
            if t.is_running else t,
            skip_unchanged=True,
        )

    def edit(self, timer_id: str, **updates: Any) -> None:
        """Merge *updates* and restart the countdown.

        The remaining time is reset to the (possibly new) duration, so an
        edit always leaves the timer at full time.  Unknown keys are
        ignored.
        """
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
        ignored = set(updates) - EDITABLE_FIELDS
        if ignored:
            logger.debug("Ignoring non-editable fields %s", sorted(ignored))

        def _apply(t: TimerRecord) -> TimerRecord:
            duration = int(changes.get("duration", t.duration))
            return t.with_changes(**{**changes, "duration": duration}, remaining_time=duration)

        self._update(timer_id, _apply)

    def toggle(self, timer_id: str) -> None:
        self._update(timer_id, lambda t: t.with_changes(is_running=not t.is_running))

    def restart(self, timer_id: str) -> None:
        self._update(
            timer_id,
            lambda t: t.with_changes(remaining_time=t.duration, is_running=False),
        )

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _update(
        self,
        timer_id: str,
        fn: Callable[[TimerRecord], TimerRecord],
        *,
        skip_unchanged: bool = False,
    ) -> None:
        """Apply *fn* to the record with *timer_id* against the live list.

        Unknown ids are a no-op.  With *skip_unchanged* an update that
        leaves the record identical is neither written nor emitted.
        """
        found = changed = False
        new_timers: list[TimerRecord] = []
        for timer in self._timers:
            if timer.id == timer_id:
                found = True
                updated = fn(timer)
                changed = updated != timer
                timer = updated
            new_timers.append(timer)

        if not found or (skip_unchanged and not changed):
            return
        self._timers = new_timers
        self._persist()
        self.timer_updated.emit(timer_id)
        self.timers_changed.emit()

    def _unique_id(self) -> str:
        taken = {t.id for t in self._timers}
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return new_id

    def _persist(self) -> None:
        self._persistence.write(self._timers)
