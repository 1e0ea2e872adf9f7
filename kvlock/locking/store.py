"""Storage capability used by LockManager, plus an in-process adapter for single-node use and tests."""

import time
from typing import Callable, Protocol


class LockStore(Protocol):
    """Minimal atomic key-value operations for locking. Injected; adapters are chosen by configuration."""

    async def set_if_absent(self, key: str, value: str) -> bool: ...
    async def get(self, key: str) -> str | None: ...
    async def set_expiry(self, key: str, seconds: int) -> None: ...
    async def compare_and_delete(self, key: str, expected: str) -> bool: ...


class InMemoryLockStore:
    """
    In-memory store: key -> value, key -> store-level deadline. For tests or single-process use.
    Each method runs without awaiting, so it is atomic with respect to other coroutines on the loop.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._values: dict[str, str] = {}
        self._deadlines: dict[str, float] = {}

    def _evict_if_expired(self, key: str) -> None:
        deadline = self._deadlines.get(key)
        if deadline is not None and self._clock() >= deadline:
            self._values.pop(key, None)
            self._deadlines.pop(key, None)

    async def set_if_absent(self, key: str, value: str) -> bool:
        self._evict_if_expired(key)
        if key in self._values:
            return False
        self._values[key] = value
        return True

    async def get(self, key: str) -> str | None:
        self._evict_if_expired(key)
        return self._values.get(key)

    async def set_expiry(self, key: str, seconds: int) -> None:
        self._evict_if_expired(key)
        if key in self._values:
            self._deadlines[key] = self._clock() + seconds

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        self._evict_if_expired(key)
        if self._values.get(key) != expected:
            return False
        del self._values[key]
        self._deadlines.pop(key, None)
        return True

    def ttl(self, key: str) -> float | None:
        """Remaining store-level TTL in seconds, or None if the key has none (or does not exist)."""
        self._evict_if_expired(key)
        deadline = self._deadlines.get(key)
        if deadline is None:
            return None
        return deadline - self._clock()

    def __contains__(self, key: str) -> bool:
        self._evict_if_expired(key)
        return key in self._values
