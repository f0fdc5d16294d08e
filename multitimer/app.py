"""Main application window for MultiTimer."""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QIcon, QImage, QPainter, QColor, QPen, QPixmap, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QScrollArea, QMessageBox, QSystemTrayIcon, QMenu, QDialog,
)

from .audio.sounds import AlarmPlayer
from .settings import Settings, load_settings, save_settings
from .timer.notifier import Alarm, ExpiryNotifier
from .timer.store import TimerStore
from .ui.alert_toast import AlertStack
from .ui.styles import build_stylesheet
from .ui.timer_card import TimerCard
from .ui.timer_form import TimerFormDialog
from .validation import draft_from_form

logger = logging.getLogger(__name__)


# ── tray‑icon image generation ────────────────────────────────────────────


def _make_tray_icon(ringing: bool) -> QIcon:
    """Circle outline when quiet, filled circle while the alarm rings."""
    size = 64  # draw at 2× for HiDPI
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor("#DC2626") if ringing else QColor("#2563EB")
    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if ringing:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    p.end()

    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class MultiTimerApp(QMainWindow):
    """Main application window.

    The store is passed in (already loaded); the window builds the alert
    stack, the expiry notifier and one :class:`TimerCard` per timer.
    """

    def __init__(
        self,
        store: TimerStore,
        *,
        settings: Settings | None = None,
        alarm: Alarm | None = None,
        save_settings_fn: Callable[[Settings], None] = save_settings,
    ) -> None:
        super().__init__()
        self.setWindowTitle("MultiTimer")
        self.setMinimumSize(420, 480)

        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._save_settings = save_settings_fn

        # ── alarm ─────────────────────────────────────────────────────
        if alarm is None:
            player = AlarmPlayer(parent=self)
            player.set_volume(self._settings.sound_volume)
            alarm = player
        self._alarm = alarm
        self._apply_sound_enabled()

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(20, 16, 20, 16)
        root_layout.setSpacing(12)

        header = QHBoxLayout()
        heading = QLabel("Timers", central)
        heading.setStyleSheet("font-size: 24px; font-weight: 700;")
        header.addWidget(heading)
        header.addStretch()
        self._add_btn = QPushButton("+ Add Timer", central)
        self._add_btn.setObjectName("primaryButton")
        self._add_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._add_btn.clicked.connect(self.open_add_dialog)
        header.addWidget(self._add_btn)
        root_layout.addLayout(header)

        self._scroll = QScrollArea(central)
        self._scroll.setWidgetResizable(True)
        list_host = QWidget(self._scroll)
        self._list_layout = QVBoxLayout(list_host)
        self._list_layout.setContentsMargins(0, 0, 0, 0)
        self._list_layout.setSpacing(12)
        self._empty_label = QLabel("No timers yet. Add one to get started.", list_host)
        self._empty_label.setObjectName("emptyLabel")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._list_layout.addWidget(self._empty_label)
        self._list_layout.addStretch()
        self._scroll.setWidget(list_host)
        root_layout.addWidget(self._scroll)

        # Alert stack overlays the list (child of central)
        self._alert_stack = AlertStack(central)

        # ── system tray icon ──────────────────────────────────────────
        self._tray_icon: QSystemTrayIcon | None = None
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon = QSystemTrayIcon(self)
            self._tray_icon.setIcon(_make_tray_icon(False))
            self._tray_icon.setToolTip("MultiTimer")
            self._tray_icon.activated.connect(self._on_tray_activated)
            self._build_tray_menu()
            self._tray_icon.show()

        self._build_menu_bar()

        # ── store + expiry notifier ───────────────────────────────────
        self._store = store
        self._cards: dict[str, TimerCard] = {}
        self._notifier = ExpiryNotifier(self._alarm, self, parent=self)
        self._notifier.alarm_changed.connect(self._on_alarm_changed)

        self._store.timer_added.connect(self._add_card)
        self._store.timer_removed.connect(self._remove_card)
        for record in self._store.timers:
            self._add_card(record.id)
        self._notifier.watch_store(self._store)

        self._restore_geometry()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def store(self) -> TimerStore:
        return self._store

    @property
    def notifier(self) -> ExpiryNotifier:
        return self._notifier

    @property
    def alert_stack(self) -> AlertStack:
        return self._alert_stack

    def card(self, timer_id: str) -> TimerCard | None:
        return self._cards.get(timer_id)

    @property
    def card_ids(self) -> list[str]:
        return list(self._cards)

    # ══════════════════════════════════════════════════════════════════
    #  ALERT SURFACE (used by the expiry notifier)
    # ══════════════════════════════════════════════════════════════════

    def raise_alert(self, message: str, on_dismiss: Callable[[], None]) -> str:
        alert_id = self._alert_stack.raise_alert(message, on_dismiss)
        self._send_notification("Timer finished", message)
        return alert_id

    def retract(self, alert_id: str) -> None:
        self._alert_stack.retract(alert_id)

    def _send_notification(self, title: str, body: str) -> None:
        """Desktop notification via the tray icon."""
        if not self._settings.notifications_enabled:
            return
        if self._settings.do_not_disturb:
            return
        if self._tray_icon is not None:
            self._tray_icon.showMessage(title, body)

    def show_error(self, message: str) -> None:
        self._alert_stack.show_error(message)

    # ══════════════════════════════════════════════════════════════════
    #  TIMER LIST
    # ══════════════════════════════════════════════════════════════════

    def _add_card(self, timer_id: str) -> None:
        if timer_id in self._cards:
            return
        card = TimerCard(self._store, self._notifier, timer_id, self._scroll.widget())
        card.edit_requested.connect(self.open_edit_dialog)
        self._cards[timer_id] = card
        # Insert before the trailing stretch
        self._list_layout.insertWidget(self._list_layout.count() - 1, card)
        self._update_empty_state()

    def _remove_card(self, timer_id: str) -> None:
        card = self._cards.pop(timer_id, None)
        if card is None:
            return
        card.dispose()
        self._list_layout.removeWidget(card)
        card.hide()
        card.deleteLater()
        self._update_empty_state()

    def _update_empty_state(self) -> None:
        self._empty_label.setVisible(not self._cards)

    # ══════════════════════════════════════════════════════════════════
    #  DIALOGS
    # ══════════════════════════════════════════════════════════════════

    def open_add_dialog(self) -> None:
        dlg = TimerFormDialog(self, on_error=self.show_error)
        if dlg.exec() == QDialog.DialogCode.Accepted:
            self._store.add(draft_from_form(dlg.form_data()))

    def open_edit_dialog(self, timer_id: str) -> None:
        record = self._store.get(timer_id)
        if record is None:
            return
        dlg = TimerFormDialog(self, timer=record, on_error=self.show_error)
        if dlg.exec() == QDialog.DialogCode.Accepted:
            draft = draft_from_form(dlg.form_data())
            self._notifier.rearm(timer_id)
            self._store.edit(
                timer_id,
                title=draft.title,
                description=draft.description,
                duration=draft.duration,
            )

    def _open_settings(self) -> None:
        """Open the settings dialog and apply any changes."""
        from .ui.settings_dialog import SettingsDialog

        def _preview_click():
            if isinstance(self._alarm, AlarmPlayer):
                self._alarm.set_volume(self._settings.sound_volume)
                self._alarm.preview()

        dlg = SettingsDialog(
            self._settings,
            parent=self,
            sound_preview_callback=_preview_click,
        )
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        """Push current Settings into the alarm."""
        if isinstance(self._alarm, AlarmPlayer):
            self._alarm.set_volume(self._settings.sound_volume)
        self._apply_sound_enabled()

    def _apply_sound_enabled(self) -> None:
        if isinstance(self._alarm, AlarmPlayer):
            self._alarm.set_enabled(
                self._settings.sound_enabled and not self._settings.do_not_disturb
            )

    # ══════════════════════════════════════════════════════════════════
    #  MENUS + TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()
        app_menu = menu_bar.addMenu("MultiTimer")

        add_action = QAction("Add Timer…", self)
        add_action.setShortcut(QKeySequence("Ctrl+N"))
        add_action.triggered.connect(self.open_add_dialog)
        app_menu.addAction(add_action)

        prefs_action = QAction("Preferences…", self)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)
        app_menu.addAction(prefs_action)

        app_menu.addSeparator()

        quit_action = QAction("Quit MultiTimer", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_with_confirm)
        app_menu.addAction(quit_action)

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        show_action = menu.addAction("Show MultiTimer")
        show_action.triggered.connect(self._show_window)
        self._tray_dismiss_action = menu.addAction("Dismiss All Alerts")
        self._tray_dismiss_action.triggered.connect(self.dismiss_all)
        self._tray_dismiss_action.setEnabled(False)
        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)
        self._tray_icon.setContextMenu(menu)

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._show_window()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def dismiss_all(self) -> None:
        for timer_id in sorted(self._notifier.expired_ids):
            self._notifier.dismiss(timer_id)

    def _on_alarm_changed(self, active: bool) -> None:
        if self._tray_icon is None:
            return
        self._tray_icon.setIcon(_make_tray_icon(active))
        self._tray_dismiss_action.setEnabled(active)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        try:
            self._save_settings(self._settings)
        except OSError:
            logger.exception("Failed to save window geometry")

    def _schedule_geometry_save(self) -> None:
        """Debounce geometry saves — restart 500ms timer on each move/resize."""
        if hasattr(self, "_geometry_save_timer"):
            self._geometry_save_timer.start()

    def _quit_with_confirm(self) -> None:
        """Quit, but ask first if any timer is counting down."""
        if any(t.is_running and t.remaining_time > 0 for t in self._store.timers):
            reply = QMessageBox.question(
                self,
                "Quit MultiTimer?",
                "Running timers stop when MultiTimer quits. Quit anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return
        self._save_geometry()
        self._quit_app()

    def _quit_app(self) -> None:
        self.dismiss_all()
        if self._tray_icon is not None:
            self._tray_icon.hide()
        from PyQt6.QtWidgets import QApplication
        QApplication.instance().quit()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Hide to the tray instead of quitting (if enabled)."""
        self._save_geometry()
        if (
            self._settings.minimize_to_tray
            and self._tray_icon is not None
            and self._tray_icon.isVisible()
        ):
            event.ignore()
            self.hide()
        else:
            if self._tray_icon is not None:
                self._tray_icon.hide()
            event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if hasattr(self, "_alert_stack"):
            self._alert_stack.reposition()
        self._schedule_geometry_save()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._schedule_geometry_save()
