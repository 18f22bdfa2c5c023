"""
Shared fixtures: a controllable clock, an in-memory durable tier and
snapshot/payload builders.
"""

from decimal import Decimal

import pytest

from domain.models.currency import RateSnapshot

T0 = 1_760_000_000_000


class FakeClock:
    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class InMemoryStorage:
    """Dict-backed durable tier; set ``fail_reads`` / ``fail_writes`` to an exception to inject failures."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls = {}
        self.fail_reads = None
        self.fail_writes = None
        self.reads = 0

    async def get_item(self, key):
        self.reads += 1
        if self.fail_reads:
            raise self.fail_reads
        return self.data.get(key)

    async def set_item(self, key, value, ttl=None):
        if self.fail_writes:
            raise self.fail_writes
        self.data[key] = value
        self.ttls[key] = ttl

    async def remove_item(self, key):
        if self.fail_writes:
            raise self.fail_writes
        self.data.pop(key, None)

    async def keys(self, prefix):
        return [key for key in self.data if key.startswith(prefix)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def make_snapshot(clock):
    def _make(base='USD', rates=None, fetched_at_ms=None):
        return RateSnapshot(
            base_currency=base,
            fetched_at_ms=clock.now if fetched_at_ms is None else fetched_at_ms,
            rates={code: Decimal(str(rate)) for code, rate in (rates or {'EUR': '0.93', 'GBP': '0.79'}).items()},
        )

    return _make


@pytest.fixture
def make_payload(clock):
    def _make(base='USD', rates=None, timestamp=None):
        return {
            'success': True,
            'base': base,
            'timestamp': clock.now // 1000 if timestamp is None else timestamp,
            'rates': rates or {'EUR': 0.93, 'GBP': 0.79, 'JPY': 149.5},
        }

    return _make


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep
