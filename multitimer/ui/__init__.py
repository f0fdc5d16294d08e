"""UI package."""

from .alert_toast import AlertStack, AlertToast
from .settings_dialog import SettingsDialog
from .timer_card import TimerCard
from .timer_form import TimerFormDialog

__all__ = [
    "AlertStack",
    "AlertToast",
    "SettingsDialog",
    "TimerCard",
    "TimerFormDialog",
]
