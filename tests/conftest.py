"""Shared pytest fixtures for MultiTimer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from multitimer.database.db import configure_engine, init_db
from multitimer.timer.notifier import ExpiryNotifier
from multitimer.timer.persistence import TimerPersistence
from multitimer.timer.store import TimerStore

from helpers import FakeAlarm, FakeAlerts, MemoryKV


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def store(qapp):
    """Fresh, empty TimerStore persisting to the in-memory database."""
    s = TimerStore(TimerPersistence())
    s.load()
    return s


@pytest.fixture
def kv():
    return MemoryKV()


@pytest.fixture
def memory_store(qapp, kv):
    """TimerStore backed by a plain dict (for inspecting raw blobs)."""
    return TimerStore(TimerPersistence(getter=kv.get, setter=kv.set))


@pytest.fixture
def alarm():
    return FakeAlarm()


@pytest.fixture
def alerts():
    return FakeAlerts()


@pytest.fixture
def notifier(qapp, alarm, alerts):
    return ExpiryNotifier(alarm, alerts)
