"""Tests for settings persistence and the alarm player.

Covers:
- Settings dataclass defaults and JSON round-trip
- Corrupt settings fall back to defaults
- Alarm WAV generation
- AlarmPlayer start/stop idempotence, volume and mute
"""

from __future__ import annotations

import io
import json
import wave

import pytest

from multitimer.settings import Settings, load_settings, save_settings
from multitimer.audio.sounds import (
    AlarmPlayer,
    SOUND_NAMES,
    SAMPLE_RATE,
    _generate_alarm,
    _generate_click,
)


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("multitimer.settings.SETTINGS_PATH", path)
    return path


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.sound_enabled is True
        assert s.sound_volume == 70
        assert s.notifications_enabled is True
        assert s.do_not_disturb is False
        assert s.minimize_to_tray is False
        assert s.window_x is None

    def test_round_trip(self, settings_path):
        save_settings(Settings(sound_volume=30, do_not_disturb=True, window_x=10))
        loaded = load_settings()
        assert loaded.sound_volume == 30
        assert loaded.do_not_disturb is True
        assert loaded.window_x == 10

    def test_missing_file_gives_defaults(self, settings_path):
        assert load_settings() == Settings()

    def test_unknown_keys_ignored(self, settings_path):
        settings_path.write_text(json.dumps({"sound_volume": 10, "theme": "x"}))
        assert load_settings().sound_volume == 10

    def test_corrupt_file_gives_defaults(self, settings_path):
        settings_path.write_text("{broken")
        assert load_settings() == Settings()

    def test_non_object_file_gives_defaults(self, settings_path):
        settings_path.write_text("[1, 2, 3]")
        assert load_settings() == Settings()


# ═══════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


def _read_wav(data: bytes) -> wave.Wave_read:
    return wave.open(io.BytesIO(data), "rb")


class TestSynthesis:
    @pytest.mark.parametrize("gen", [_generate_alarm, _generate_click])
    def test_valid_mono_16bit(self, gen):
        with _read_wav(gen()) as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > 0

    def test_alarm_loop_period_is_about_a_second(self):
        with _read_wav(_generate_alarm()) as wf:
            seconds = wf.getnframes() / wf.getframerate()
        assert 1.0 <= seconds <= 2.5


# ═══════════════════════════════════════════════════════════════════════
#  ALARM PLAYER
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def player(qapp, tmp_path):
    return AlarmPlayer(sounds_dir=tmp_path / "sounds")


class TestAlarmPlayer:
    def test_writes_sound_cache(self, player, tmp_path):
        for name in SOUND_NAMES:
            assert (tmp_path / "sounds" / f"{name}.wav").exists()

    def test_start_stop(self, player):
        assert player.active is False
        player.start()
        assert player.active is True
        player.stop()
        assert player.active is False

    def test_start_is_idempotent(self, player):
        player.start()
        player.start()
        assert player.active is True
        player.stop()
        assert player.active is False

    def test_stop_when_idle_is_noop(self, player):
        player.stop()
        assert player.active is False

    def test_volume_clamped(self, player):
        player.set_volume(150)
        assert player.volume == 100
        player.set_volume(-5)
        assert player.volume == 0

    def test_mute_keeps_logical_state(self, player):
        player.start()
        player.set_enabled(False)
        assert player.enabled is False
        assert player.active is True
        player.set_enabled(True)
        assert player.active is True
