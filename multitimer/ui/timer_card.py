"""One card per timer: title, countdown, progress and controls.

The card owns the timer's :class:`Ticker`.  Restart and delete go
through the expiry notifier first so an outstanding alert is retracted
(and the shared alarm released) before the store changes.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QFrame, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QProgressBar,
)

from ..timer.models import TimerRecord, format_time
from ..timer.notifier import ExpiryNotifier
from ..timer.store import TimerStore
from ..timer.ticker import Ticker

PROGRESS_STEPS = 1000


class TimerCard(QFrame):
    edit_requested = pyqtSignal(str)

    def __init__(
        self,
        store: TimerStore,
        notifier: ExpiryNotifier,
        timer_id: str,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        self._store = store
        self._notifier = notifier
        self._timer_id = timer_id

        self._build_ui()
        self._ticker = Ticker(store, timer_id, self)
        self._store.timer_updated.connect(self._on_timer_updated)
        self.refresh()

    @property
    def timer_id(self) -> str:
        return self._timer_id

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 18)
        layout.setSpacing(8)

        header = QHBoxLayout()
        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        self._title_label = QLabel(self)
        self._title_label.setObjectName("cardTitle")
        self._desc_label = QLabel(self)
        self._desc_label.setObjectName("cardDescription")
        self._desc_label.setWordWrap(True)
        text_col.addWidget(self._title_label)
        text_col.addWidget(self._desc_label)
        header.addLayout(text_col, 1)

        self._edit_btn = self._small_button("Edit", "iconButton", self._on_edit)
        self._restart_btn = self._small_button("Restart", "iconButton", self._on_restart)
        self._delete_btn = self._small_button("Delete", "dangerButton", self._on_delete)
        for btn in (self._edit_btn, self._restart_btn, self._delete_btn):
            header.addWidget(btn, 0, Qt.AlignmentFlag.AlignTop)
        layout.addLayout(header)

        self._time_label = QLabel(self)
        self._time_label.setObjectName("cardTime")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(self)
        self._progress.setRange(0, PROGRESS_STEPS)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        controls = QHBoxLayout()
        controls.addStretch()
        self._toggle_btn = QPushButton(self)
        self._toggle_btn.setObjectName("primaryButton")
        self._toggle_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._toggle_btn.clicked.connect(self._on_toggle)
        controls.addWidget(self._toggle_btn)
        controls.addStretch()
        layout.addLayout(controls)

    def _small_button(self, text: str, object_name: str, slot) -> QPushButton:
        btn = QPushButton(text, self)
        btn.setObjectName(object_name)
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.clicked.connect(slot)
        return btn

    # ── display ───────────────────────────────────────────────────────────

    def refresh(self) -> None:
        record = self._store.get(self._timer_id)
        if record is None:
            return
        self._title_label.setText(record.title)
        self._desc_label.setText(record.description)
        self._desc_label.setVisible(bool(record.description))
        self._time_label.setText(format_time(record.remaining_time))
        self._progress.setValue(round(record.percent_remaining * PROGRESS_STEPS))
        self._progress.setProperty("finished", record.is_finished)
        self._progress.style().polish(self._progress)
        self._toggle_btn.setText(_toggle_text(record))

    def time_text(self) -> str:
        return self._time_label.text()

    def toggle_text(self) -> str:
        return self._toggle_btn.text()

    # ── actions ───────────────────────────────────────────────────────────

    def _on_toggle(self) -> None:
        self._store.toggle(self._timer_id)

    def _on_restart(self) -> None:
        self._notifier.rearm(self._timer_id)
        self._store.restart(self._timer_id)

    def _on_delete(self) -> None:
        self._notifier.forget(self._timer_id)
        self._store.delete(self._timer_id)

    def _on_edit(self) -> None:
        self.edit_requested.emit(self._timer_id)

    def _on_timer_updated(self, timer_id: str) -> None:
        if timer_id == self._timer_id:
            self.refresh()

    def dispose(self) -> None:
        """Stop ticking and detach from the store (card is going away)."""
        self._ticker.dispose()
        try:
            self._store.timer_updated.disconnect(self._on_timer_updated)
        except TypeError:
            pass


def _toggle_text(record: TimerRecord) -> str:
    if record.is_running:
        return "Pause"
    if 0 < record.remaining_time < record.duration:
        return "Resume"
    return "Start"
