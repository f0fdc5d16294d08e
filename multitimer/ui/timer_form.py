"""Add / edit timer dialog.

Submitting runs :func:`~multitimer.validation.validate_timer_form`; the
dialog only closes when the values pass.  The failure message goes to
*on_error* (the main window shows it as a toast) and to an inline label.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel, QLineEdit,
    QPlainTextEdit, QSpinBox, QPushButton, QWidget,
)

from ..timer.models import TimerRecord
from ..validation import TimerFormData, split_seconds, validate_timer_form


class TimerFormDialog(QDialog):
    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        timer: TimerRecord | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self._editing = timer is not None
        self._on_error = on_error
        self.setWindowTitle("Edit Timer" if self._editing else "Add Timer")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._build_ui()
        if timer is not None:
            self._populate(timer)

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(14)

        form = QFormLayout()
        form.setHorizontalSpacing(16)
        form.setVerticalSpacing(10)

        self._title_edit = QLineEdit(self)
        self._title_edit.setPlaceholderText("e.g. Tea")
        form.addRow("Title:", self._title_edit)

        self._desc_edit = QPlainTextEdit(self)
        self._desc_edit.setPlaceholderText("Optional")
        self._desc_edit.setFixedHeight(70)
        form.addRow("Description:", self._desc_edit)

        time_row = QHBoxLayout()
        self._hours_spin = self._spin(" h", 99)
        self._minutes_spin = self._spin(" min", 99)
        self._seconds_spin = self._spin(" s", 99)
        for spin in (self._hours_spin, self._minutes_spin, self._seconds_spin):
            time_row.addWidget(spin)
        time_wrapper = QWidget(self)
        time_wrapper.setLayout(time_row)
        form.addRow("Duration:", time_wrapper)
        root.addLayout(form)

        self._error_label = QLabel("", self)
        self._error_label.setStyleSheet("color: #DC2626;")
        self._error_label.hide()
        root.addWidget(self._error_label)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel", self)
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)
        self._submit_btn = QPushButton("Save" if self._editing else "Add Timer", self)
        self._submit_btn.setObjectName("primaryButton")
        self._submit_btn.setDefault(True)
        self._submit_btn.clicked.connect(self.submit)
        btn_row.addWidget(self._submit_btn)
        root.addLayout(btn_row)

    def _spin(self, suffix: str, maximum: int) -> QSpinBox:
        spin = QSpinBox(self)
        spin.setRange(0, maximum)
        spin.setSuffix(suffix)
        return spin

    def _populate(self, timer: TimerRecord) -> None:
        self._title_edit.setText(timer.title)
        self._desc_edit.setPlainText(timer.description)
        hours, minutes, seconds = split_seconds(timer.duration)
        self._hours_spin.setValue(hours)
        self._minutes_spin.setValue(minutes)
        self._seconds_spin.setValue(seconds)

    # ── public ────────────────────────────────────────────────────────

    @property
    def editing(self) -> bool:
        return self._editing

    def form_data(self) -> TimerFormData:
        return TimerFormData(
            title=self._title_edit.text(),
            description=self._desc_edit.toPlainText(),
            hours=self._hours_spin.value(),
            minutes=self._minutes_spin.value(),
            seconds=self._seconds_spin.value(),
        )

    def set_form_data(self, data: TimerFormData) -> None:
        self._title_edit.setText(data.title)
        self._desc_edit.setPlainText(data.description)
        self._hours_spin.setValue(data.hours)
        self._minutes_spin.setValue(data.minutes)
        self._seconds_spin.setValue(data.seconds)

    def error_text(self) -> str:
        return self._error_label.text()

    def submit(self) -> bool:
        """Validate and close on success.  Returns whether it closed."""
        if not validate_timer_form(self.form_data(), self._show_error):
            return False
        self._error_label.hide()
        self.accept()
        return True

    def _show_error(self, message: str) -> None:
        self._error_label.setText(message)
        self._error_label.show()
        if self._on_error is not None:
            self._on_error(message)
