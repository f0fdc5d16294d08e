"""Floating toasts: persistent expiry alerts and short-lived errors.

:class:`AlertStack` is the alert surface the expiry notifier talks to::

    stack = AlertStack(central_widget)
    alert_id = stack.raise_alert('Timer "Tea" has ended!', on_dismiss)
    stack.retract(alert_id)

Expiry alerts stay until dismissed.  Error toasts (validation messages)
fade out on their own.
"""

from __future__ import annotations

import itertools
from typing import Callable

from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve
from PyQt6.QtWidgets import (
    QWidget, QFrame, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QGraphicsOpacityEffect,
)

from .styles import PALETTE, hex_to_rgba


class AlertToast(QFrame):
    """One toast card.  ``dismissible`` adds a Dismiss button."""

    FADE_IN_MS = 250

    def __init__(
        self,
        message: str,
        parent: QWidget | None = None,
        *,
        kind: str = "success",
        on_dismiss: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("alertToast")
        self.setFixedWidth(320)
        self._on_dismiss = on_dismiss

        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 10, 10, 10)
        layout.setSpacing(10)

        self._label = QLabel(message, self)
        self._label.setWordWrap(True)
        layout.addWidget(self._label, 1)

        self._dismiss_btn: QPushButton | None = None
        if on_dismiss is not None:
            self._dismiss_btn = QPushButton("Dismiss", self)
            self._dismiss_btn.setCursor(Qt.CursorShape.PointingHandCursor)
            self._dismiss_btn.clicked.connect(self._dismiss_clicked)
            layout.addWidget(self._dismiss_btn)

        colour = PALETTE["danger"] if kind == "error" else PALETTE["success"]
        self.setStyleSheet(
            "QFrame#alertToast {"
            f"  background-color: {PALETTE['bg_secondary']};"
            f"  border: 1px solid {hex_to_rgba(colour, 160)};"
            "  border-radius: 10px;"
            "}"
            f"QFrame#alertToast QLabel {{ color: {colour}; font-weight: 600;"
            " background: transparent; }"
        )

        # Fade in
        self._opacity = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._opacity)
        self._fade_anim = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade_anim.setDuration(self.FADE_IN_MS)
        self._fade_anim.setStartValue(0.0)
        self._fade_anim.setEndValue(1.0)
        self._fade_anim.setEasingCurve(QEasingCurve.Type.OutCubic)

    @property
    def message(self) -> str:
        return self._label.text()

    def fade_in(self) -> None:
        self._fade_anim.start()

    def _dismiss_clicked(self) -> None:
        if self._on_dismiss is not None:
            self._on_dismiss()


class AlertStack(QWidget):
    """Column of toasts pinned to the top-right corner of its parent."""

    ERROR_DISPLAY_MS = 3500
    MARGIN = 16

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setStyleSheet("background: transparent;")
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(8)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignTop)

        self._ids = itertools.count(1)
        self._toasts: dict[str, AlertToast] = {}
        self.hide()

    # ── alert surface ─────────────────────────────────────────────────

    def raise_alert(self, message: str, on_dismiss: Callable[[], None]) -> str:
        """Show a persistent alert; returns its id."""
        alert_id = f"alert-{next(self._ids)}"

        def _clicked() -> None:
            self.retract(alert_id)
            on_dismiss()

        self._add(alert_id, AlertToast(message, self, on_dismiss=_clicked))
        return alert_id

    def retract(self, alert_id: str) -> None:
        """Remove an alert.  Unknown or already-removed ids are ignored."""
        toast = self._toasts.pop(alert_id, None)
        if toast is None:
            return
        self._layout.removeWidget(toast)
        toast.hide()
        toast.deleteLater()
        self.reposition()

    # ── transient errors ──────────────────────────────────────────────

    def show_error(self, message: str) -> str:
        alert_id = f"error-{next(self._ids)}"
        self._add(alert_id, AlertToast(message, self, kind="error"))
        QTimer.singleShot(self.ERROR_DISPLAY_MS, lambda: self.retract(alert_id))
        return alert_id

    # ── queries ───────────────────────────────────────────────────────

    @property
    def alert_ids(self) -> list[str]:
        return list(self._toasts)

    def message_for(self, alert_id: str) -> str | None:
        toast = self._toasts.get(alert_id)
        return toast.message if toast else None

    def toast(self, alert_id: str) -> AlertToast | None:
        return self._toasts.get(alert_id)

    # ── internal ──────────────────────────────────────────────────────

    def _add(self, alert_id: str, toast: AlertToast) -> None:
        self._toasts[alert_id] = toast
        self._layout.addWidget(toast)
        toast.show()
        toast.fade_in()
        self.reposition()

    def reposition(self) -> None:
        """Pin to the top-right of the parent; hide when empty."""
        if not self._toasts:
            self.hide()
            return
        self.adjustSize()
        if self.parent():
            pw = self.parent().width()
            self.move(max(self.MARGIN, pw - self.width() - self.MARGIN), self.MARGIN)
        self.show()
        self.raise_()
