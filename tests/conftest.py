"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cognitive_os.composer import SessionComposer
from cognitive_os.db import MemoryStore
from cognitive_os.engine import CognitiveEngine
from cognitive_os.rating import RatingEngine
from cognitive_os.skills import SkillRegistry
from cognitive_os.tracker import PerformanceTracker, Scheduler, ScheduledTask


class ManualTask(ScheduledTask):
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler that only fires when the test says so."""

    def __init__(self):
        self.tasks = []

    def schedule(self, delay, callback):
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self):
        return [t for t in self.tasks if not t.cancelled]

    def run_pending(self):
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            if not task.cancelled:
                task.callback()


class FakeClock:
    """Callable clock the test can move forward."""

    def __init__(self, start=datetime(2024, 3, 15, 10, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def registry():
    """Fresh registry with the built-in catalog."""
    return SkillRegistry.default()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def rating_engine(registry, store):
    return RatingEngine(registry, store)


@pytest.fixture
def tracker(rating_engine, store, scheduler, clock):
    return PerformanceTracker(rating_engine, store, scheduler=scheduler, clock=clock)


@pytest.fixture
def composer(rating_engine, tracker, clock):
    return SessionComposer(rating_engine, tracker, clock=clock)


@pytest.fixture
def engine(store, scheduler, clock):
    return CognitiveEngine(SkillRegistry.default(), store, scheduler=scheduler, clock=clock)


@pytest.fixture
def make_trial():
    """Factory for raw trial payloads."""
    def _make(correct=True, **kwargs):
        data = {"correct": correct, "reaction_time_ms": 500.0}
        if not correct:
            data["error_type"] = "miss"
        data.update(kwargs)
        return data
    return _make
