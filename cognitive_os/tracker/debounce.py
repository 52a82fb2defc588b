"""
Debounced Tasks

Explicit schedule/cancel primitive for coalescing snapshot writes.
A new request replaces the pending one, so only the last request in
a burst runs.
"""

from typing import Callable, Optional
import logging
import threading

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a scheduled callback."""

    def cancel(self):
        raise NotImplementedError


class Scheduler:
    """Runs a callback after a delay."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        raise NotImplementedError


class _TimerTask(ScheduledTask):
    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self):
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon threading.Timer objects."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _TimerTask(timer)


class Debouncer:
    """
    Single pending task, replaced on each request.

    Usage:
        debouncer = Debouncer(1.0)
        debouncer.request(write_snapshot)  # cancels any pending write
    """

    def __init__(self, delay: float = 1.0, scheduler: Optional[Scheduler] = None):
        self.delay = delay
        self.scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.Lock()
        self._pending: Optional[ScheduledTask] = None
        self._callback: Optional[Callable[[], None]] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, callback: Callable[[], None]):
        """Schedule callback, replacing whatever was pending."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._callback = callback
            self._pending = self.scheduler.schedule(
                self.delay, lambda: self._fire(generation)
            )

    def cancel(self):
        """Drop the pending task without running it."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None
            self._callback = None
            self._generation += 1

    def flush(self):
        """Run the pending task now, if any."""
        with self._lock:
            callback = self._callback
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None
            self._callback = None
            self._generation += 1
        if callback is not None:
            self._run(callback)

    def _fire(self, generation: int):
        with self._lock:
            # A cancelled timer can still fire if it was already running
            if generation != self._generation:
                return
            callback = self._callback
            self._pending = None
            self._callback = None
        if callback is not None:
            self._run(callback)

    @staticmethod
    def _run(callback: Callable[[], None]):
        try:
            callback()
        except Exception:
            logger.exception("Debounced task failed")
