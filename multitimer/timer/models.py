"""Timer record types.

A :class:`TimerRecord` is immutable; the store swaps in a new record on
every mutation so a snapshot handed out earlier never changes under the
caller's feet.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class TimerDraft:
    """Validated form values for a new timer."""

    title: str
    duration: int  # seconds
    description: str = ""


@dataclass(frozen=True)
class TimerRecord:
    id: str
    title: str
    duration: int  # seconds
    remaining_time: int  # seconds, 0 ≤ remaining_time ≤ duration
    description: str = ""
    is_running: bool = False

    @property
    def is_finished(self) -> bool:
        return self.remaining_time <= 0

    @property
    def percent_remaining(self) -> float:
        """1.0 → 0.0 as the countdown runs."""
        if self.duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self.remaining_time / self.duration))

    def with_changes(self, **changes: Any) -> TimerRecord:
        return replace(self, **changes)

    # ── serialization (persisted layout uses camelCase keys) ──────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "remainingTime": self.remaining_time,
            "isRunning": self.is_running,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerRecord:
        """Build a record from its persisted form.

        Raises ``KeyError`` / ``TypeError`` / ``ValueError`` for entries
        that are missing fields or carry the wrong types.
        """
        duration = int(data["duration"])
        remaining = int(data["remainingTime"])
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            duration=duration,
            remaining_time=max(0, min(remaining, duration)),
            is_running=data.get("isRunning") is True,
        )


EDITABLE_FIELDS: frozenset[str] = frozenset({"title", "description", "duration"})


def format_time(seconds: int) -> str:
    """``H:MM:SS`` once past an hour, ``MM:SS`` below."""
    h, rest = divmod(max(0, seconds), 3600)
    m, s = divmod(rest, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"
