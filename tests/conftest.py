"""Shared test fixtures for all test modules."""

from datetime import datetime, timedelta, timezone

import pytest

from mdexport.history.storage import MemoryStorage
from mdexport.history.store import HistoryStore


class StepClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start=None):
        self.current = start or datetime(2025, 8, 4, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        value = self.current
        self.current += timedelta(minutes=1)
        return value


class FailingStorage(MemoryStorage):
    """MemoryStorage whose writes (and optionally reads) raise OSError."""

    def __init__(self, initial=None, fail_reads=False):
        super().__init__(initial)
        self.fail_writes = True
        self.fail_reads = fail_reads

    def get(self, key):
        if self.fail_reads:
            raise OSError("Simulated read error")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise OSError("Simulated write error")
        super().set(key, value)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    """HistoryStore over in-memory storage with a bound of 50."""
    return HistoryStore(storage, max_items=50, clock=clock)


@pytest.fixture
def failing_storage_factory():
    """Factory for storage backends that raise OSError."""
    return FailingStorage
