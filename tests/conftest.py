"""Shared test fixtures and configuration.

Sets up fake environment variables so src.config doesn't sys.exit(),
and provides common fixtures like a fake scheduler and seeded stores.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "fake-token-for-tests")
os.environ.setdefault("LEVEL_TICK_SECONDS", "6")

import itertools

import pytest


class FakeTask:
    """ScheduledTask that records how many times it was cancelled."""

    def __init__(self, callback, interval, name):
        self.callback = callback
        self.interval = interval
        self.name = name
        self.cancel_calls = 0

    @property
    def cancelled(self):
        return self.cancel_calls > 0

    def cancel(self):
        self.cancel_calls += 1


class FakeScheduler:
    """SchedulerPort that only runs callbacks when a test calls fire()."""

    def __init__(self):
        self.tasks = []

    def run_repeating(self, callback, interval, name):
        task = FakeTask(callback, interval, name)
        self.tasks.append(task)
        return task

    def fire(self, times=1):
        """Run every live task's callback *times* times."""
        for _ in range(times):
            for task in self.tasks:
                if not task.cancelled:
                    task.callback()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def id_factory():
    """Deterministic entry ids: entry-1, entry-2, ..."""
    counter = itertools.count(1)
    return lambda: f"entry-{next(counter)}"


@pytest.fixture
def schedule_store(id_factory):
    """A ScheduleStore seeded with the default schedule."""
    from src.data.defaults import default_schedule
    from src.data.stores import ScheduleStore
    return ScheduleStore(default_schedule(), id_factory=id_factory)


@pytest.fixture
def alert_store():
    from src.data.defaults import default_alerts
    from src.data.stores import AlertStore
    return AlertStore(default_alerts())


@pytest.fixture
def profile_store():
    from src.data.defaults import default_profile
    from src.data.stores import ProfileStore
    return ProfileStore(default_profile())


@pytest.fixture
def session(fake_scheduler, id_factory):
    """An open DashboardSession whose simulator always draws 0.5."""
    from src.core.session import DashboardSession
    return DashboardSession.open(
        fake_scheduler, rand=lambda: 0.5, id_factory=id_factory,
    )
