"""Timers for watch mode: periodic pulls and debounced pushes after page edits."""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ..utils.logger import get_logger

log = get_logger(__name__)

EDIT_QUIET_PERIOD = 2.0  # seconds


class Debouncer:
    """
    Run ``callback`` once, ``delay`` seconds after the last ``trigger()``.

    Triggers arriving during the quiet period restart it. Callbacks never
    overlap: a trigger during a running callback schedules one more run.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._run_lock = threading.Lock()

    def trigger(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self) -> bool:
        with self._timer_lock:
            return self._timer is not None and self._timer.is_alive()

    def cancel(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self) -> None:
        with self._run_lock:
            try:
                self.callback()
            except Exception:
                log.exception("Debounced sync failed")


class SyncScheduler:
    """
    Drives ``ticksync watch``.

    Each :meth:`tick` pulls when the auto-sync interval has elapsed and starts a
    debounced push when the page changed since the scheduler last wrote or saw it.
    """

    def __init__(self, engine, store, settings, debounce_delay: float = EDIT_QUIET_PERIOD,
                 clock: Callable[[], float] = time.monotonic):
        self.engine = engine
        self.store = store
        self.settings = settings
        self.clock = clock
        self._sync_lock = threading.Lock()
        self.debouncer = Debouncer(debounce_delay, self.push)
        self._last_pull: Optional[float] = None
        self._seen_mtime = store.mtime(settings.target_page_path)

    @property
    def interval_seconds(self) -> float:
        return self.settings.sync_interval * 60

    def pull(self) -> None:
        with self._sync_lock:
            self.engine.pull()
            self._seen_mtime = self.store.mtime(self.settings.target_page_path)
            self._last_pull = self.clock()

    def push(self) -> None:
        with self._sync_lock:
            self.engine.reconcile_from_document()
            self._seen_mtime = self.store.mtime(self.settings.target_page_path)

    def pull_due(self) -> bool:
        if not self.settings.auto_sync or self.settings.sync_interval <= 0:
            return False
        return self._last_pull is None or self.clock() - self._last_pull >= self.interval_seconds

    def tick(self) -> None:
        mtime = self.store.mtime(self.settings.target_page_path)
        if mtime and mtime != self._seen_mtime:
            self._seen_mtime = mtime
            log.info("Page changed; push scheduled in %.0fs", self.debouncer.delay)
            self.debouncer.trigger()

        if self.pull_due() and not self.debouncer.pending:
            try:
                self.pull()
            except Exception:
                log.exception("Scheduled pull failed")
                self._last_pull = self.clock()

    def run_forever(self, poll_seconds: float = 1.0) -> None:
        try:
            while True:
                self.tick()
                time.sleep(poll_seconds)
        finally:
            self.debouncer.cancel()
