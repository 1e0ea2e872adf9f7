"""Factory: explicit adapter selection, namespace wiring, setup errors surface to the caller."""

from unittest.mock import AsyncMock

import pytest

from kvlock.config.settings import LockSettings
from kvlock.infrastructure.cache.redis_client import RedisClient
from kvlock.locking import factory
from kvlock.locking.exceptions import StorageUnavailableError
from kvlock.locking.scope import LockScope
from kvlock.locking.store import InMemoryLockStore


def _settings(**overrides) -> LockSettings:
    return LockSettings(_env_file=None, **overrides)


@pytest.mark.asyncio
async def test_memory_backend():
    settings = _settings(storage_backend="memory", deployment_id="billing-api", lock_min_ttl=10)
    manager = await factory.create_lock_manager(settings)
    assert manager.namespace.prefix == "billing_api:"
    assert await manager.acquire("job:1", "alice") is True
    await manager.release("job:1")


@pytest.mark.asyncio
async def test_redis_backend_connects_with_namespace_index(monkeypatch):
    connect = AsyncMock()
    monkeypatch.setattr(RedisClient, "connect", connect)
    settings = _settings(storage_backend="redis", lock_key_prefix="orders:", redis_db=4)

    manager = await factory.create_lock_manager(settings)

    connect.assert_awaited_once()
    assert manager.namespace.index == 4
    assert isinstance(manager._store, RedisClient)
    assert manager._store.client.connection_pool.connection_kwargs["db"] == 4


@pytest.mark.asyncio
async def test_redis_unavailable_is_fatal_at_setup(monkeypatch):
    monkeypatch.setattr(
        RedisClient,
        "connect",
        AsyncMock(side_effect=StorageUnavailableError("Redis unavailable: refused")),
    )
    with pytest.raises(StorageUnavailableError):
        await factory.create_lock_manager(_settings(storage_backend="redis"))


@pytest.mark.asyncio
async def test_explicit_store_and_scope_tracking():
    store = InMemoryLockStore()
    scope = LockScope()
    manager = await factory.create_lock_manager(
        _settings(storage_backend="redis"), store=store, scope=scope
    )
    assert manager._store is store
    assert scope.managers == [manager]
