"""
Tests for watch-mode scheduling: periodic pulls and debounced pushes.
"""
import threading
from unittest.mock import MagicMock

from conftest import MemoryDocumentStore
from ticksync.sync.scheduler import Debouncer, SyncScheduler
from ticksync.utils.config import Settings

PAGE = "TickTick Tasks"


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestDebouncer:
    def test_fires_once_after_quiet_period(self):
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            fired.set()

        debouncer = Debouncer(0.05, callback)
        for _ in range(5):
            debouncer.trigger()

        assert fired.wait(2)
        debouncer.cancel()
        assert calls == [1]

    def test_cancel(self):
        callback = MagicMock()
        debouncer = Debouncer(10, callback)
        debouncer.trigger()
        assert debouncer.pending
        debouncer.cancel()
        assert not debouncer.pending
        callback.assert_not_called()


def _scheduler(settings=None, store=None):
    settings = settings or Settings(sync_interval=5, auto_sync=True)
    store = store or MemoryDocumentStore()
    engine = MagicMock()
    engine.pull.side_effect = lambda: store.write(PAGE, "generated")
    clock = FakeClock()
    scheduler = SyncScheduler(engine, store, settings, debounce_delay=60, clock=clock)
    scheduler.debouncer = MagicMock(pending=False, delay=60)
    return scheduler, engine, store, clock


class TestSyncScheduler:
    def test_first_tick_pulls(self):
        scheduler, engine, _, _ = _scheduler()
        scheduler.tick()
        engine.pull.assert_called_once()

    def test_pull_repeats_on_interval(self):
        scheduler, engine, _, clock = _scheduler()
        scheduler.tick()
        clock.now = 299
        scheduler.tick()
        assert engine.pull.call_count == 1
        clock.now = 300
        scheduler.tick()
        assert engine.pull.call_count == 2

    def test_own_write_does_not_trigger_push(self):
        scheduler, _, _, _ = _scheduler()
        scheduler.tick()
        scheduler.tick()
        scheduler.debouncer.trigger.assert_not_called()

    def test_user_edit_triggers_push(self):
        scheduler, _, store, _ = _scheduler()
        scheduler.tick()
        store.write(PAGE, "edited")
        scheduler.tick()
        scheduler.debouncer.trigger.assert_called_once()

    def test_no_pull_while_push_is_pending(self):
        scheduler, engine, _, _ = _scheduler()
        scheduler.debouncer.pending = True
        scheduler.tick()
        engine.pull.assert_not_called()

    def test_auto_sync_off(self):
        scheduler, engine, _, _ = _scheduler(Settings(auto_sync=False))
        scheduler.tick()
        engine.pull.assert_not_called()

    def test_zero_interval_disables_pulls(self):
        scheduler, engine, _, _ = _scheduler(Settings(sync_interval=0))
        scheduler.tick()
        engine.pull.assert_not_called()

    def test_failed_pull_waits_for_next_interval(self):
        scheduler, engine, _, clock = _scheduler()
        engine.pull.side_effect = RuntimeError("offline")
        scheduler.tick()
        clock.now = 10
        scheduler.tick()
        assert engine.pull.call_count == 1

    def test_push_runs_reconcile_and_absorbs_its_own_write(self):
        store = MemoryDocumentStore()
        scheduler, engine, _, _ = _scheduler(store=store)
        store.write(PAGE, "edited")
        scheduler.push()
        engine.reconcile_from_document.assert_called_once()
        scheduler.tick()
        scheduler.debouncer.trigger.assert_not_called()
