"""Global pytest fixtures."""

import pytest
from django.core.cache import cache

from farm.services.snapshots import SnapshotStore
from farm.services.timestamps import TimestampStore


class FakeClock:
    """Deterministic clock for invalidation timestamps."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 60) -> int:
        self.now += seconds
        return self.now


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before each test."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timestamps(clock):
    """Timestamp store on the test cache with a fake clock."""
    return TimestampStore(cache=cache, namespace="test", clock=clock)


@pytest.fixture
def snapshots(tmp_path):
    """Snapshot store in a temporary directory."""
    return SnapshotStore(tmp_path / "cache")
