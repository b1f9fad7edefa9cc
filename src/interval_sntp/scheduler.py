#!/usr/bin/env python3
"""
Interval Refresher

Runs a refresh callable immediately and then on a fixed interval in a
background thread. Start, stop, pause and resume are explicit so a UI can
keep the user's "timer on" intent across pause/resume cycles.
"""

import time
import threading
import logging
from enum import Enum
from typing import Any, Callable, Optional

from .constants import DEFAULT_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    """Refresher lifecycle states."""
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class IntervalRefresher:
    """
    Cancellable periodic task.

    PAUSED differs from STOPPED only in intent: a paused refresher is still
    active and resume() brings it back, a stopped one stays off.
    """

    def __init__(self, refresh: Callable[[], Any],
                 interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
                 on_result: Optional[Callable[[Any], None]] = None,
                 on_error: Optional[Callable[[Exception], None]] = None,
                 join_timeout: float = 5.0):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.refresh = refresh
        self.interval_seconds = interval_seconds
        self.on_result = on_result
        self.on_error = on_error

        self.state = TimerState.STOPPED
        self.worker_thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()
        self.lock = threading.Lock()
        self.join_timeout = join_timeout

        # Statistics
        self.stats_lock = threading.Lock()
        self.stats = {
            'ticks': 0,
            'successes': 0,
            'failures': 0
        }

    @property
    def is_active(self) -> bool:
        return self.state != TimerState.STOPPED

    def start(self):
        """Start refreshing, replacing any worker that is already running."""
        with self.lock:
            previous = self._detach_worker()
        self._join(previous)
        with self.lock:
            self._launch_worker()
            self.state = TimerState.RUNNING
        logger.info(f"Interval refresher started ({self.interval_seconds}s interval)")

    def stop(self):
        """Stop refreshing and clear the active flag."""
        with self.lock:
            previous = self._detach_worker()
            self.state = TimerState.STOPPED
        self._join(previous)
        logger.info("Interval refresher stopped")

    def pause(self):
        """Halt the worker but remember that refreshing is wanted."""
        with self.lock:
            if self.state != TimerState.RUNNING:
                return
            previous = self._detach_worker()
            self.state = TimerState.PAUSED
        self._join(previous)
        logger.info("Interval refresher paused")

    def resume(self):
        """Restart a paused refresher. No effect in other states."""
        with self.lock:
            if self.state != TimerState.PAUSED:
                return
            self._launch_worker()
            self.state = TimerState.RUNNING
        logger.info("Interval refresher resumed")

    def toggle(self) -> bool:
        """Stop when active, start otherwise. Returns the new active flag."""
        if self.is_active:
            self.stop()
        else:
            self.start()
        return self.is_active

    def _launch_worker(self):
        stop_event = threading.Event()
        self.stop_event = stop_event
        self.worker_thread = threading.Thread(
            target=self._run_loop, args=(stop_event,), name="interval-refresher", daemon=True
        )
        self.worker_thread.start()

    def _detach_worker(self) -> Optional[threading.Thread]:
        self.stop_event.set()
        thread = self.worker_thread
        self.worker_thread = None
        return thread

    def _join(self, thread: Optional[threading.Thread]):
        # A callback may stop the refresher from inside its own worker
        if thread and thread is not threading.current_thread():
            thread.join(timeout=self.join_timeout)

    def _run_loop(self, stop_event: threading.Event):
        """Tick immediately, then once per interval until stop_event is set."""
        while not stop_event.is_set():
            started = time.monotonic()
            try:
                self._tick(stop_event)
            except Exception as e:
                logger.error(f"Refresher loop error: {e}")
            remaining = self.interval_seconds - (time.monotonic() - started)
            stop_event.wait(max(remaining, 0.0))

    def _tick(self, stop_event: threading.Event):
        self._count('ticks')
        try:
            result = self.refresh()
        except Exception as e:
            self._count('failures')
            logger.warning(f"Refresh failed: {e}")
            # A worker that outlived its join must not report after stop/pause
            if self.on_error and not stop_event.is_set():
                self.on_error(e)
            return

        self._count('successes')
        if self.on_result and not stop_event.is_set():
            self.on_result(result)

    def _count(self, key: str):
        with self.stats_lock:
            self.stats[key] += 1
