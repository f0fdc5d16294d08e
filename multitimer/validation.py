"""Form validation for new and edited timers.

``validate_timer_form`` reports the first problem it finds through the
*on_error* callback (the UI routes it to an error toast) and returns
False; the store is never called with values that failed here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .timer.models import TimerDraft

MAX_TITLE_LENGTH = 50
MAX_DURATION_SECONDS = 24 * 60 * 60

MSG_TITLE_REQUIRED = "Title is required"
MSG_TITLE_TOO_LONG = f"Title must be less than {MAX_TITLE_LENGTH} characters"
MSG_NEGATIVE = "Time values cannot be negative"
MSG_OUT_OF_RANGE = "Minutes and seconds must be between 0 and 59"
MSG_ZERO = "Please set a time greater than 0"
MSG_TOO_LONG = "Timer cannot exceed 24 hours"


@dataclass
class TimerFormData:
    title: str = ""
    description: str = ""
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return to_seconds(self.hours, self.minutes, self.seconds)


def to_seconds(hours: int, minutes: int, seconds: int) -> int:
    return hours * 3600 + minutes * 60 + seconds


def split_seconds(total: int) -> tuple[int, int, int]:
    """Inverse of :func:`to_seconds` → ``(hours, minutes, seconds)``."""
    hours, rest = divmod(max(0, total), 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def validate_timer_form(
    data: TimerFormData, on_error: Callable[[str], None]
) -> bool:
    title = data.title.strip()
    if not title:
        on_error(MSG_TITLE_REQUIRED)
        return False
    if len(title) > MAX_TITLE_LENGTH:
        on_error(MSG_TITLE_TOO_LONG)
        return False
    if data.hours < 0 or data.minutes < 0 or data.seconds < 0:
        on_error(MSG_NEGATIVE)
        return False
    if data.minutes > 59 or data.seconds > 59:
        on_error(MSG_OUT_OF_RANGE)
        return False

    total = data.total_seconds
    if total == 0:
        on_error(MSG_ZERO)
        return False
    if total > MAX_DURATION_SECONDS:
        on_error(MSG_TOO_LONG)
        return False
    return True


def draft_from_form(data: TimerFormData) -> TimerDraft:
    """Store-ready draft from form values that already passed validation."""
    return TimerDraft(
        title=data.title.strip(),
        description=data.description.strip(),
        duration=data.total_seconds,
    )
