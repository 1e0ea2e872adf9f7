"""
Distributed lock manager over a shared key-value store. Set-if-absent to acquire,
one stale-lock takeover attempt, ownership-checked atomic release, per-instance held-lock registry.
"""

import logging
import time
from typing import Callable

from kvlock.locking.exceptions import LockAlreadyHeldError, LockNotHeldError
from kvlock.locking.lock_value import LockValue, random_owner
from kvlock.locking.namespace import LockNamespace
from kvlock.locking.store import LockStore
from kvlock.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)

DEFAULT_TTL = 120
MIN_TTL = 5
STORE_TTL_MARGIN = 600


class LockManager:
    """
    Non-blocking lock manager. One instance may hold many keys, each at most once.
    Not safe for concurrent use of a single instance; give each task its own manager.
    """

    def __init__(
        self,
        store: LockStore,
        namespace: LockNamespace | str = "",
        *,
        default_ttl: int = DEFAULT_TTL,
        min_ttl: int = MIN_TTL,
        store_ttl_margin: int = STORE_TTL_MARGIN,
        clock: Callable[[], float] = time.time,
        metrics: MetricsCollector | None = None,
    ) -> None:
        if isinstance(namespace, str):
            namespace = LockNamespace(prefix=namespace)
        self._store = store
        self._namespace = namespace
        self._default_ttl = default_ttl
        self._min_ttl = min_ttl
        self._margin = store_ttl_margin
        self._clock = clock
        self._metrics = metrics
        # prefixed key -> exact value written at acquisition
        self._locks: dict[str, str] = {}

    @property
    def namespace(self) -> LockNamespace:
        return self._namespace

    @property
    def held_keys(self) -> list[str]:
        """Caller keys (without prefix) currently held by this instance."""
        return [self._namespace.strip(k) for k in self._locks]

    def is_held(self, key: str) -> bool:
        return self._namespace.key(key) in self._locks

    def _record(self, name: str, value: float = 1.0) -> None:
        if self._metrics is not None:
            self._metrics.increment(name, value, namespace=self._namespace.prefix)

    async def acquire(self, key: str, owner: str | int | None = None, ttl: int | None = None) -> bool:
        """
        Try once to take the lock. Returns True if acquired, False if held by someone else
        (or a stale takeover lost the race). Raises LockAlreadyHeldError if this instance holds key.
        Store errors propagate. If only the store TTL could not be set, the key stays
        registered so release()/release_all() can still remove it.
        """
        full_key = self._namespace.key(key)
        if full_key in self._locks:
            raise LockAlreadyHeldError(
                f"Lock already held for key {key!r} by this instance; release it before re-acquiring"
            )
        ttl = max(self._default_ttl if ttl is None else ttl, self._min_ttl)
        owner = str(owner) if owner and owner != "0" else random_owner()

        started = time.perf_counter()
        acquired = await self._add(full_key, owner, ttl)
        if not acquired:
            acquired = await self._take_over_if_stale(full_key, owner, ttl)
        if self._metrics is not None:
            self._metrics.observe_latency(
                "lock_acquire_latency",
                (time.perf_counter() - started) * 1000,
                namespace=self._namespace.prefix,
            )

        if acquired:
            self._record("lock_acquired")
            logger.info("lock_acquired", extra={"lock_key": full_key, "owner": owner, "ttl": ttl})
        else:
            self._record("lock_contended")
            logger.debug("lock_contended", extra={"lock_key": full_key, "owner": owner})
        return acquired

    async def _add(self, full_key: str, owner: str, ttl: int) -> bool:
        value = LockValue.build(owner, ttl, self._clock()).encode()
        if not await self._store.set_if_absent(full_key, value):
            return False
        # Registry first, so release_all can still clean up if set_expiry fails.
        self._locks[full_key] = value
        # Orphan safety net; the logical expiry in the value governs takeover.
        await self._store.set_expiry(full_key, ttl + self._margin)
        return True

    async def _take_over_if_stale(self, full_key: str, owner: str, ttl: int) -> bool:
        current = await self._store.get(full_key)
        if current is None:
            return False
        parsed = LockValue.parse(current)
        if parsed is None:
            logger.warning("lock_value_malformed", extra={"lock_key": full_key, "value": current})
            return False
        if not parsed.is_expired(self._clock()):
            return False
        if not await self._store.compare_and_delete(full_key, current):
            # Another contender removed or replaced it first.
            return False
        self._record("lock_takeover")
        logger.info(
            "lock_stale_removed",
            extra={"lock_key": full_key, "previous_owner": parsed.owner, "expired_at": parsed.expires_at},
        )
        return await self._add(full_key, owner, ttl)

    async def release(self, key: str) -> None:
        """
        Release a lock this instance acquired. Raises LockNotHeldError (without touching the store)
        if it never did. The registry entry is dropped even if the store value had changed.
        """
        full_key = self._namespace.key(key)
        if full_key not in self._locks:
            raise LockNotHeldError(f"Cannot release key {key!r}: never successfully locked by this instance")
        value = self._locks.pop(full_key)
        await self._delete(full_key, value)

    async def release_all(self) -> None:
        """Release every held key. Per-key failures are logged and skipped; the registry always ends empty."""
        for full_key, value in list(self._locks.items()):
            try:
                await self._delete(full_key, value)
            except Exception as e:
                self._record("lock_release_error")
                logger.warning(
                    "lock_release_failed",
                    extra={"lock_key": full_key, "error": str(e)},
                )
            finally:
                self._locks.pop(full_key, None)

    async def _delete(self, full_key: str, value: str) -> bool:
        deleted = await self._store.compare_and_delete(full_key, value)
        if deleted:
            self._record("lock_released")
            logger.info("lock_released", extra={"lock_key": full_key})
        else:
            self._record("lock_release_lost")
            logger.warning("lock_release_lost", extra={"lock_key": full_key})
        return deleted
