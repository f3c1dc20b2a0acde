"""Shared fixtures: trackers over in-memory storage and a fixed clock.

Every tracker built here owns its storage, so tests never read or write the
project's real data file.
"""

import datetime

import pytest

from explog.storage import ExpenseStore, MemoryStorage
from explog.tracker import ExpenseTracker


def local_ms(*args) -> int:
    """Epoch milliseconds for a local wall-clock time, e.g. local_ms(2026, 1, 2, 10, 0)."""
    return int(datetime.datetime(*args).timestamp() * 1000)


NOW = local_ms(2026, 10, 18, 12, 0)


class FixedClock:
    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def tracker(storage, clock):
    return ExpenseTracker(store=ExpenseStore(storage), clock=clock)
