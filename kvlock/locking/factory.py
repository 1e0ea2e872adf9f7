"""Builds the configured store adapter and lock managers. Adapter choice is explicit via settings.storage_backend."""

import logging

from kvlock.config.settings import LockSettings, get_settings
from kvlock.infrastructure.cache.redis_client import RedisClient
from kvlock.locking.lock_manager import LockManager
from kvlock.locking.namespace import LockNamespace
from kvlock.locking.scope import LockScope
from kvlock.locking.store import InMemoryLockStore, LockStore
from kvlock.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)


async def create_lock_store(settings: LockSettings, namespace: LockNamespace) -> LockStore:
    """Connect the configured adapter. Raises StorageUnavailableError if Redis cannot be reached."""
    if settings.storage_backend == "memory":
        logger.info("lock_store_selected", extra={"backend": "memory"})
        return InMemoryLockStore()
    if settings.storage_backend == "redis":
        client = RedisClient(
            settings.redis_url,
            db=namespace.index,
            password=settings.redis_password,
            socket_timeout=settings.redis_socket_timeout,
        )
        await client.connect()
        logger.info("lock_store_selected", extra={"backend": "redis", "db": namespace.index})
        return client
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


async def create_lock_manager(
    settings: LockSettings | None = None,
    *,
    store: LockStore | None = None,
    scope: LockScope | None = None,
    metrics: MetricsCollector | None = None,
) -> LockManager:
    """
    LockManager wired from settings: namespace resolved, store connected (unless one is passed in),
    TTL floor and store margin applied, and tracked by scope if given.
    """
    settings = settings or get_settings()
    namespace = LockNamespace.from_settings(settings)
    if store is None:
        store = await create_lock_store(settings, namespace)
    manager = LockManager(
        store,
        namespace,
        default_ttl=settings.lock_default_ttl,
        min_ttl=settings.lock_min_ttl,
        store_ttl_margin=settings.lock_store_ttl_margin,
        metrics=metrics,
    )
    if scope is not None:
        scope.track(manager)
    return manager
