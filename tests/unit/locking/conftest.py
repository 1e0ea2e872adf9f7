"""Fixtures for locking unit tests: controllable clock, in-memory store, lock managers sharing one store."""

import pytest

from kvlock.locking.lock_manager import LockManager
from kvlock.locking.store import InMemoryLockStore

PREFIX = "billing_api:"


class FakeClock:
    """Callable wall clock; tests move time with advance()."""

    def __init__(self, now: float = 1675238190.1234) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryLockStore(clock=clock)


@pytest.fixture
def make_manager(store, clock):
    def _make(**kwargs) -> LockManager:
        kwargs.setdefault("clock", clock)
        return LockManager(store, PREFIX, **kwargs)

    return _make


@pytest.fixture
def lock(make_manager):
    return make_manager()
