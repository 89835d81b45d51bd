from datetime import datetime, timedelta, UTC

import pytest

from linkshortener.access_log import MemoryAccessLog
from linkshortener.dao import ShortURLMemoryDAO
from linkshortener.store import MappingStore


class FakeClock:
    """Manually advanced clock returning timezone-aware UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def t0() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(t0: datetime) -> FakeClock:
    return FakeClock(t0)


@pytest.fixture
def access_log(clock: FakeClock) -> MemoryAccessLog:
    return MemoryAccessLog(clock=clock)


@pytest.fixture
def store(clock: FakeClock, access_log: MemoryAccessLog) -> MappingStore:
    return MappingStore(dao=ShortURLMemoryDAO(), access_log=access_log, clock=clock)
