"""Locking layer: lock manager, value format, namespaces, store adapters, unit-of-work scope."""

from kvlock.locking.exceptions import (
    LockAlreadyHeldError,
    LockError,
    LockNotHeldError,
    LockUsageError,
    StorageUnavailableError,
)
from kvlock.locking.lock_manager import LockManager
from kvlock.locking.lock_value import LockValue
from kvlock.locking.namespace import LockNamespace
from kvlock.locking.scope import LockScope
from kvlock.locking.store import InMemoryLockStore, LockStore

__all__ = [
    "InMemoryLockStore",
    "LockAlreadyHeldError",
    "LockError",
    "LockManager",
    "LockNamespace",
    "LockNotHeldError",
    "LockScope",
    "LockStore",
    "LockUsageError",
    "LockValue",
    "StorageUnavailableError",
]
