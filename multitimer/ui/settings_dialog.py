"""Settings dialog for MultiTimer.

A modal dialog for the alarm sound, notification and window
preferences.  Changes are saved immediately to disk; the caller applies
them once the dialog closes.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSlider, QCheckBox, QPushButton, QFrame, QWidget,
)

from ..settings import Settings, save_settings


class SettingsDialog(QDialog):
    """Modal dialog for all user preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(400)
        self.setModal(True)

        self._settings = settings
        self._sound_preview = sound_preview_callback
        self._loading = True

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Sound & Notifications section ────────────────────────────
        root.addWidget(self._section_label("Alarm & Notifications"))
        snd_form = QFormLayout()
        snd_form.setContentsMargins(0, 0, 0, 0)
        snd_form.setHorizontalSpacing(20)
        snd_form.setVerticalSpacing(10)

        self._sound_cb = QCheckBox("Alarm sound")
        self._sound_cb.toggled.connect(self._on_toggle_changed)
        snd_form.addRow("", self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("70%")
        self._vol_label.setMinimumWidth(36)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        self._vol_slider.sliderReleased.connect(self._on_volume_released)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)

        vol_wrapper = QWidget()
        vol_wrapper.setLayout(vol_row)
        snd_form.addRow("Volume:", vol_wrapper)

        self._notif_cb = QCheckBox("Desktop notifications")
        self._notif_cb.toggled.connect(self._on_toggle_changed)
        snd_form.addRow("", self._notif_cb)

        self._dnd_cb = QCheckBox("Do not disturb")
        self._dnd_cb.toggled.connect(self._on_toggle_changed)
        snd_form.addRow("", self._dnd_cb)

        root.addLayout(snd_form)
        root.addWidget(self._separator())

        # ── Window section ───────────────────────────────────────────
        root.addWidget(self._section_label("Window"))
        win_form = QFormLayout()
        win_form.setContentsMargins(0, 0, 0, 0)

        self._tray_cb = QCheckBox("Keep running in the tray on close")
        self._tray_cb.toggled.connect(self._on_toggle_changed)
        win_form.addRow("", self._tray_cb)

        root.addLayout(win_form)

        # ── close button ─────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE / CHANGE HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        s = self._settings
        # Saves stay blocked while the widgets are filled in
        self._sound_cb.setChecked(s.sound_enabled)
        self._vol_slider.setValue(s.sound_volume)
        self._vol_label.setText(f"{s.sound_volume}%")
        self._notif_cb.setChecked(s.notifications_enabled)
        self._dnd_cb.setChecked(s.do_not_disturb)
        self._tray_cb.setChecked(s.minimize_to_tray)
        self._loading = False

    def _on_toggle_changed(self) -> None:
        if self._loading:
            return
        self._settings.sound_enabled = self._sound_cb.isChecked()
        self._settings.notifications_enabled = self._notif_cb.isChecked()
        self._settings.do_not_disturb = self._dnd_cb.isChecked()
        self._settings.minimize_to_tray = self._tray_cb.isChecked()
        self._save()

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        if self._loading:
            return
        self._settings.sound_volume = value
        self._save()

    def _on_volume_released(self) -> None:
        """Play a click when the user releases the volume slider."""
        if self._sound_preview:
            self._sound_preview()

    def _save(self) -> None:
        save_settings(self._settings)

    @property
    def settings(self) -> Settings:
        return self._settings
