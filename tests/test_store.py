"""Tests for the timer store.

Covers: add/delete/tick/edit/toggle/restart semantics, stale-id no-ops,
write-through persistence, reload normalization and store signals.
"""

import json

import pytest

from multitimer.timer.models import TimerRecord
from multitimer.timer.persistence import STORAGE_KEY, TimerPersistence
from multitimer.timer.store import TimerStore

from helpers import SignalCollector, add_timer, run_down


# ═══════════════════════════════════════════════════════════════════════════
#  ADD / DELETE
# ═══════════════════════════════════════════════════════════════════════════


class TestAdd:

    def test_new_timer_is_full_and_stopped(self, store):
        t = add_timer(store, "Tea", 5, "green")
        assert t.title == "Tea"
        assert t.description == "green"
        assert t.duration == 5
        assert t.remaining_time == 5
        assert t.is_running is False
        assert store.get(t.id) == t

    def test_ids_are_unique(self, store):
        ids = {add_timer(store, f"t{i}").id for i in range(20)}
        assert len(ids) == 20

    def test_id_collision_is_regenerated(self, qapp, kv):
        ids = iter(["dup", "dup", "other"])
        s = TimerStore(
            TimerPersistence(getter=kv.get, setter=kv.set),
            id_factory=lambda: next(ids),
        )
        a = add_timer(s)
        b = add_timer(s)
        assert a.id == "dup"
        assert b.id == "other"

    def test_preserves_insertion_order(self, store):
        a = add_timer(store, "a")
        b = add_timer(store, "b")
        c = add_timer(store, "c")
        assert [t.id for t in store.timers] == [a.id, b.id, c.id]

    def test_add_emits_signals(self, store):
        added, changed = SignalCollector(), SignalCollector()
        store.timer_added.connect(added)
        store.timers_changed.connect(changed)
        t = add_timer(store)
        assert added.items == [t.id]
        assert len(changed) == 1


class TestDelete:

    def test_delete_removes(self, store):
        t = add_timer(store)
        store.delete(t.id)
        assert store.get(t.id) is None
        assert len(store) == 0

    def test_delete_unknown_is_noop(self, store):
        t = add_timer(store)
        removed = SignalCollector()
        store.timer_removed.connect(removed)
        store.delete("nope")
        assert len(store) == 1
        assert store.get(t.id) == t
        assert len(removed) == 0

    def test_delete_emits_removed(self, store):
        t = add_timer(store)
        removed = SignalCollector()
        store.timer_removed.connect(removed)
        store.delete(t.id)
        assert removed.items == [t.id]

    def test_contains(self, store):
        t = add_timer(store)
        assert t.id in store
        assert "missing" not in store
        assert 42 not in store


# ═══════════════════════════════════════════════════════════════════════════
#  TICK
# ═══════════════════════════════════════════════════════════════════════════


class TestTick:

    def test_tick_on_stopped_timer_is_noop(self, store):
        t = add_timer(store, duration=5)
        store.tick(t.id)
        assert store.get(t.id).remaining_time == 5

    def test_tick_decrements_by_one(self, store):
        t = add_timer(store, duration=5)
        store.toggle(t.id)
        for expected in (4, 3, 2, 1, 0):
            store.tick(t.id)
            assert store.get(t.id).remaining_time == expected

    def test_floors_at_zero(self, store):
        t = add_timer(store, duration=3)
        store.toggle(t.id)
        run_down(store, t.id, 10)
        assert store.get(t.id).remaining_time == 0

    def test_reaching_zero_keeps_running_flag(self, store):
        t = add_timer(store, duration=2)
        store.toggle(t.id)
        run_down(store, t.id, 2)
        record = store.get(t.id)
        assert record.remaining_time == 0
        assert record.is_running is True

    def test_tick_unknown_is_noop(self, store):
        add_timer(store)
        store.tick("ghost")
        assert len(store) == 1

    def test_tick_at_floor_does_not_emit(self, store):
        t = add_timer(store, duration=1)
        store.toggle(t.id)
        store.tick(t.id)
        updated = SignalCollector()
        store.timer_updated.connect(updated)
        store.tick(t.id)
        assert len(updated) == 0

    def test_tick_only_touches_its_timer(self, store):
        a = add_timer(store, "a", 5)
        b = add_timer(store, "b", 5)
        store.toggle(a.id)
        store.toggle(b.id)
        store.tick(a.id)
        assert store.get(a.id).remaining_time == 4
        assert store.get(b.id).remaining_time == 5


# ═══════════════════════════════════════════════════════════════════════════
#  EDIT / TOGGLE / RESTART
# ═══════════════════════════════════════════════════════════════════════════


class TestEdit:

    def test_edit_duration_resets_remaining(self, store):
        t = add_timer(store, duration=10)
        store.toggle(t.id)
        run_down(store, t.id, 4)
        store.edit(t.id, duration=30)
        record = store.get(t.id)
        assert record.duration == 30
        assert record.remaining_time == 30

    def test_edit_title_only_restarts_countdown(self, store):
        t = add_timer(store, duration=10)
        store.toggle(t.id)
        run_down(store, t.id, 3)
        store.edit(t.id, title="Coffee")
        record = store.get(t.id)
        assert record.title == "Coffee"
        assert record.remaining_time == 10

    def test_edit_keeps_running_flag(self, store):
        t = add_timer(store, duration=10)
        store.toggle(t.id)
        store.edit(t.id, description="new")
        assert store.get(t.id).is_running is True

    def test_edit_ignores_id_and_unknown_fields(self, store):
        t = add_timer(store)
        store.edit(t.id, id="hijack", colour="red", title="Ok")
        assert store.get(t.id).title == "Ok"
        assert store.get("hijack") is None

    def test_edit_unknown_is_noop(self, store):
        t = add_timer(store)
        store.edit("ghost", title="x")
        assert store.get(t.id) == t


class TestToggle:

    def test_toggle_flips(self, store):
        t = add_timer(store)
        store.toggle(t.id)
        assert store.get(t.id).is_running is True
        store.toggle(t.id)
        assert store.get(t.id).is_running is False

    def test_toggle_finished_timer_allowed(self, store):
        t = add_timer(store, duration=1)
        store.toggle(t.id)
        store.tick(t.id)
        store.toggle(t.id)  # pause at zero
        store.toggle(t.id)  # "run" at zero
        record = store.get(t.id)
        assert record.is_running is True
        store.tick(t.id)
        assert store.get(t.id).remaining_time == 0


class TestRestart:

    @pytest.mark.parametrize("ticks,running", [(0, False), (2, True), (5, True), (5, False)])
    def test_restart_from_any_state(self, store, ticks, running):
        t = add_timer(store, duration=5)
        store.toggle(t.id)
        run_down(store, t.id, ticks)
        if not running:
            store.toggle(t.id)
        store.restart(t.id)
        record = store.get(t.id)
        assert record.remaining_time == 5
        assert record.is_running is False

    def test_restart_unknown_is_noop(self, store):
        store.restart("ghost")
        assert len(store) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════════


class TestWriteThrough:

    def test_every_mutation_writes_whole_collection(self, memory_store, kv):
        a = add_timer(memory_store, "a", 5)
        b = add_timer(memory_store, "b", 7)
        memory_store.toggle(a.id)
        memory_store.tick(a.id)

        stored = json.loads(kv.data[STORAGE_KEY])
        assert [t["id"] for t in stored] == [a.id, b.id]
        assert stored[0]["remainingTime"] == 4
        assert stored[0]["isRunning"] is True
        assert stored[1]["remainingTime"] == 7

    def test_only_tick_skips_unchanged_writes(self, memory_store, kv):
        t = add_timer(memory_store, duration=5)
        before = kv.writes
        memory_store.tick(t.id)
        assert kv.writes == before

        memory_store.restart(t.id)
        memory_store.edit(t.id)
        assert kv.writes == before + 2

    def test_unknown_id_does_not_write(self, memory_store, kv):
        add_timer(memory_store)
        before = kv.writes
        memory_store.toggle("ghost")
        memory_store.restart("ghost")
        assert kv.writes == before

    def test_delete_writes(self, memory_store, kv):
        a = add_timer(memory_store)
        memory_store.delete(a.id)
        assert json.loads(kv.data[STORAGE_KEY]) == []

    def test_write_failure_keeps_memory_state(self, memory_store, kv):
        kv.fail_writes = True
        t = add_timer(memory_store)
        memory_store.toggle(t.id)
        assert memory_store.get(t.id).is_running is True

    def test_round_trip_through_database(self, store):
        a = add_timer(store, "Tea", 60, "green")
        store.toggle(a.id)
        run_down(store, a.id, 10)

        reloaded = TimerStore(TimerPersistence())
        timers = reloaded.load()
        assert len(timers) == 1
        assert timers[0].id == a.id
        assert timers[0].title == "Tea"
        assert timers[0].description == "green"
        assert timers[0].remaining_time == 50


class TestLoad:

    def _seed(self, kv, entries):
        kv.data[STORAGE_KEY] = json.dumps(entries)

    def test_load_stops_running_timers(self, memory_store, kv):
        self._seed(kv, [{
            "id": "a", "title": "A", "description": "", "duration": 60,
            "remainingTime": 42, "isRunning": True,
        }])
        [record] = memory_store.load()
        assert record.is_running is False
        assert record.remaining_time == 42

    def test_load_resets_finished_timers(self, memory_store, kv):
        self._seed(kv, [{
            "id": "a", "title": "A", "description": "", "duration": 60,
            "remainingTime": 0, "isRunning": True,
        }])
        [record] = memory_store.load()
        assert record.is_running is False
        assert record.remaining_time == 60

    def test_load_absent_is_empty(self, memory_store):
        assert memory_store.load() == []

    def test_load_corrupt_is_empty(self, memory_store, kv):
        kv.data[STORAGE_KEY] = "{not json"
        assert memory_store.load() == []

    def test_load_read_failure_is_empty(self, memory_store, kv):
        kv.fail_reads = True
        assert memory_store.load() == []

    def test_load_emits_changed(self, memory_store):
        changed = SignalCollector()
        memory_store.timers_changed.connect(changed)
        memory_store.load()
        assert len(changed) == 1

    def test_records_are_snapshots(self, store):
        t = add_timer(store)
        before = store.get(t.id)
        store.toggle(t.id)
        assert before.is_running is False
        assert isinstance(store.get(t.id), TimerRecord)
