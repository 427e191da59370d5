"""Shared test fixtures: manual timers, an isolated state store and a viewer session."""

import pytest

from json_table_viewer.scheduler import CoalescingScheduler
from json_table_viewer.session import ViewerSession
from json_table_viewer.state import StateStore


class ManualTimer:
    """Stand-in for `threading.Timer` that only fires when told to."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        # Runs even when cancelled, like a thread that already woke up.
        self.callback()


class ManualTimerFactory:

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def scheduler(timers):
    return CoalescingScheduler(timer_factory=timers)


@pytest.fixture
def store(tmp_path, scheduler):
    return StateStore(directory=tmp_path / "state", scheduler=scheduler)


@pytest.fixture
def session(store):
    return ViewerSession(store=store)
