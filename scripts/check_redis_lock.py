# scripts/check_redis_lock.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio

from kvlock.config.logging import configure_logging
from kvlock.config.settings import get_settings
from kvlock.infrastructure.cache.redis_client import RedisClient
from kvlock.locking.factory import create_lock_manager, create_lock_store
from kvlock.locking.namespace import LockNamespace
from kvlock.locking.scope import LockScope


async def check():
    settings = get_settings()
    configure_logging(settings.log_level)
    namespace = LockNamespace.from_settings(settings)
    store = await create_lock_store(settings, namespace)

    try:
        async with LockScope() as scope:
            first = await create_lock_manager(settings, store=store, scope=scope)
            second = await create_lock_manager(settings, store=store, scope=scope)

            print("Namespace:", first.namespace)
            print("First acquire:", await first.acquire("smoke:order_123", "first", ttl=10))
            print("Second acquire:", await second.acquire("smoke:order_123", "second", ttl=10))
    finally:
        if isinstance(store, RedisClient):
            await store.close()


asyncio.run(check())
