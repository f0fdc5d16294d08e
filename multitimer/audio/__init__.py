"""Audio package."""

from .sounds import AlarmPlayer, SOUND_NAMES

__all__ = ["AlarmPlayer", "SOUND_NAMES"]
