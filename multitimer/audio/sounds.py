"""Alarm synthesis and looped playback using numpy + QSoundEffect.

Sounds are generated programmatically as WAV files using sine-wave
synthesis with ADSR envelopes and cached to disk, so later launches skip
the synthesis step.

Sound names
-----------
- ``alarm``  — two-tone beep pattern, looped while any timer is expired
- ``click``  — short tick used to preview the volume setting
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..paths import APP_DATA_DIR

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_DATA_DIR / "sounds"

SOUND_NAMES = ("alarm", "click")

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_alarm() -> bytes:
    """Alarm — high/low beep pair twice, then a rest (one loop period)."""
    beep_dur = 0.14
    parts: list[np.ndarray] = []
    for _ in range(2):
        for freq in (880.0, 660.0):
            tone = _sine(freq, beep_dur) * 0.55
            env = _make_envelope(len(tone), attack=80, decay=300, sustain_level=0.6, release=400)
            parts.append(tone * env)
            parts.append(_silence(0.06))
        parts.append(_silence(0.12))
    parts.append(_silence(0.45))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_click() -> bytes:
    """Button click — very short tick, subtle."""
    duration = 0.015
    n_samples = int(SAMPLE_RATE * duration)
    tick = _sine(1200.0, duration) * 0.2
    env = _make_envelope(n_samples, attack=20, decay=50, sustain_level=0.0, release=n_samples - 70)
    # Pad with silence so QSoundEffect doesn't clip
    return _to_wav_bytes(np.concatenate([tick * env, _silence(0.03)]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "alarm": _generate_alarm,
    "click": _generate_click,
}


# ═══════════════════════════════════════════════════════════════════════════
#  ALARM PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class AlarmPlayer(QObject):
    """The shared alarm: ``start()`` loops the alarm sound, ``stop()``
    silences it.  Both are idempotent; reference counting across timers
    is the :class:`~multitimer.timer.notifier.ExpiryNotifier`'s job.

    Usage::

        alarm = AlarmPlayer(parent=self)
        alarm.set_volume(70)
        alarm.start()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._active = False
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin looping the alarm.  No-op when already active."""
        if self._active:
            return
        self._active = True
        effect = self._effects.get("alarm")
        if effect is not None and self._enabled:
            effect.play()

    def stop(self) -> None:
        """Silence the alarm.  No-op when already stopped."""
        if not self._active:
            return
        self._active = False
        effect = self._effects.get("alarm")
        if effect is not None:
            effect.stop()

    def preview(self) -> None:
        """Play the click once at the current volume."""
        if not self._enabled:
            return
        effect = self._effects.get("click")
        if effect is not None:
            effect.play()

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        """Mute or unmute.  Muting silences a ringing alarm but keeps it
        logically active, so unmuting resumes it."""
        self._enabled = enabled
        effect = self._effects.get("alarm")
        if effect is None or not self._active:
            return
        if enabled:
            effect.play()
        else:
            effect.stop()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for name, gen_fn in _GENERATORS.items():
                path = self._sounds_dir / f"{name}.wav"
                if not path.exists():
                    path.write_bytes(gen_fn())
        except OSError:
            logger.exception("Could not write sound cache to %s", self._sounds_dir)

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                if name == "alarm":
                    effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
                self._effects[name] = effect
